# =============================================================================
# File: employee_sync/config/hr_service_config.py
# Description: HR Service Read API Configuration
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from employee_sync.common.base.base_config import BaseConfig
from employee_sync.config.logging_config import get_logger

log = get_logger("employee_sync.config.hr_service")


class HrServiceConfig(BaseConfig):
    """HR service (system of record) read API configuration"""

    model_config = SettingsConfigDict(
        env_prefix='HR_SERVICE_',
    )

    base_url: str = Field(
        default="http://hr-service:8000",
        description="HR service base URL"
    )
    timeout_seconds: float = Field(default=10.0, description="Request timeout")

    aggregate_page_size: int = Field(
        default=100,
        ge=1,
        description="Page size used when walking the full employee set"
    )
    default_per_page: int = Field(default=15, ge=1, description="Default page size for employee lists")
    max_per_page: int = Field(default=100, ge=1, description="Upper bound for employee list page size")

    @property
    def employees_url(self) -> str:
        """URL for the paged employee listing"""
        return f"{self.base_url.rstrip('/')}/api/employees"

    def employee_url(self, employee_id: int) -> str:
        """URL for a single employee record"""
        return f"{self.employees_url}/{employee_id}"


@lru_cache(maxsize=1)
def get_hr_service_config() -> HrServiceConfig:
    """Get HR service configuration singleton (cached)."""
    config = HrServiceConfig()
    log.info(f"HR service configuration loaded (base_url={config.base_url})")
    return config


def reset_hr_service_config() -> None:
    """Reset config singleton (for testing)."""
    get_hr_service_config.cache_clear()
