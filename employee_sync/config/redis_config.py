# =============================================================================
# File: employee_sync/config/redis_config.py
# Description: Configuration for the Redis client (cache store and pub/sub)
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from employee_sync.common.base.base_config import BaseConfig


class RedisConfig(BaseConfig):
    """Redis connection settings shared by the cache store and notification bus."""

    model_config = SettingsConfigDict(
        env_prefix='REDIS_',
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )

    max_connections: int = Field(default=20, description="Maximum number of connections in the pool")

    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")

    socket_connect_timeout: float = Field(default=5.0, description="Socket connection timeout in seconds")

    scan_count: int = Field(
        default=100,
        description="SCAN batch hint used by prefix deletion"
    )


@lru_cache(maxsize=1)
def get_redis_config() -> RedisConfig:
    """Get Redis configuration singleton (cached)."""
    return RedisConfig()


def reset_redis_config() -> None:
    """Reset config singleton (for testing)."""
    get_redis_config.cache_clear()
