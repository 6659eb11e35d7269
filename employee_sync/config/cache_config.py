# =============================================================================
# File: employee_sync/config/cache_config.py
# Description: Derived-view cache configuration
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from employee_sync.common.base.base_config import BaseConfig


class CacheConfig(BaseConfig):
    """
    Derived-view cache settings.

    Every derived view (country checklist, employee page, employee detail)
    shares one TTL. The TTL is also the staleness bound when active
    invalidation is unavailable.
    """

    model_config = SettingsConfigDict(
        env_prefix='CACHE_',
    )

    ttl_seconds: int = Field(default=60, ge=1, description="TTL for every derived-view entry")

    key_prefix: str = Field(
        default="",
        description="Prefix prepended to every cache key (e.g. 'hub:')"
    )


@lru_cache(maxsize=1)
def get_cache_config() -> CacheConfig:
    """Get cache configuration singleton (cached)."""
    return CacheConfig()


def reset_cache_config() -> None:
    """Reset config singleton (for testing)."""
    get_cache_config.cache_clear()
