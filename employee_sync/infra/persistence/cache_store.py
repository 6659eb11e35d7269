# =============================================================================
# File: employee_sync/infra/persistence/cache_store.py
# Description: Key/value store ports for derived views and the Redis adapter
# Pattern: Ports & Adapters with an optional capability
# =============================================================================

"""
Cache store contracts.

Every backend supports exact-key operations (``CacheStore``). Backends that
can enumerate keys additionally implement ``delete_by_prefix``
(``PrefixDeletableCacheStore``). Callers check the capability with
``isinstance`` and fall back to TTL expiry when it is absent.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from redis.exceptions import RedisError

from employee_sync.common.exceptions.exceptions import CacheUnavailableError

log = logging.getLogger("employee_sync.infra.cache_store")

_GLOB_SPECIAL = "\\*?[]"


@runtime_checkable
class CacheStore(Protocol):
    """Exact-key operations. Raise CacheUnavailableError when the backend fails."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    async def delete(self, key: str) -> bool:
        ...


@runtime_checkable
class PrefixDeletableCacheStore(CacheStore, Protocol):
    """Stores that can remove every key starting with a prefix."""

    async def delete_by_prefix(self, prefix: str) -> int:
        ...


def escape_glob(text: str) -> str:
    """Escape Redis MATCH glob metacharacters so a prefix matches literally."""
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIAL else ch for ch in text)


class RedisCacheStore:
    """Redis-backed store with SCAN-based prefix deletion."""

    def __init__(self, redis_client, scan_count: int = 100, pipeline_max_size: int = 100):
        self.redis = redis_client
        self.scan_count = scan_count
        self.pipeline_max_size = pipeline_max_size

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except RedisError as e:
            raise CacheUnavailableError(f"Cache get failed for {key}: {e}") from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self.redis.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheUnavailableError(f"Cache set failed for {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            return await self.redis.delete(key) > 0
        except RedisError as e:
            raise CacheUnavailableError(f"Cache delete failed for {key}: {e}") from e

    async def delete_by_prefix(self, prefix: str) -> int:
        pattern = f"{escape_glob(prefix)}*"
        deleted = 0
        try:
            pipe = self.redis.pipeline()
            batch_count = 0

            async for key in self.redis.scan_iter(match=pattern, count=self.scan_count):
                pipe.delete(key)
                batch_count += 1

                if batch_count >= self.pipeline_max_size:
                    results = await pipe.execute()
                    deleted += sum(1 for r in results if r)
                    pipe = self.redis.pipeline()
                    batch_count = 0

            if batch_count > 0:
                results = await pipe.execute()
                deleted += sum(1 for r in results if r)

        except RedisError as e:
            raise CacheUnavailableError(f"Pattern delete failed for {pattern}: {e}") from e

        log.debug(f"Deleted {deleted} keys matching {pattern}")
        return deleted

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            log.warning(f"Cache store ping failed: {e}")
            return False
