# =============================================================================
# File: employee_sync/config/__init__.py
# =============================================================================
# EMPTY - use direct imports:
#   from employee_sync.config.rabbitmq_config import get_rabbitmq_config
#   from employee_sync.config.cache_config import get_cache_config
