# employee_sync/infra/persistence/cache_manager.py

"""
Derived-view cache for the hub.

Key templates (optionally behind CACHE_KEY_PREFIX):
- checklist:country:{country}
- employees:{country}:{page}:{perPage}
- employees:{country}:{id}

Entries are JSON documents written with a single TTL. Invalidation only ever
removes keys; it never patches a cached value.
"""

import json
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from employee_sync.checklist.validator import normalize_country
from employee_sync.common.exceptions.exceptions import CacheUnavailableError
from employee_sync.config.cache_config import CacheConfig
from employee_sync.infra.metrics.sync_metrics import (
    derived_view_cache_invalidations_total,
    derived_view_cache_requests_total,
)
from employee_sync.infra.persistence.cache_store import CacheStore, PrefixDeletableCacheStore

log = logging.getLogger("employee_sync.infra.cache_manager")


class DerivedViewCache:
    """
    Read-through cache of derived views with country-scoped invalidation.

    Two-tier invalidation:
    - active: delete the aggregate key, plus every employee key of the country
      when the store supports prefix deletion
    - passive: TTL expiry, always
    """

    def __init__(self, store: CacheStore, config: CacheConfig):
        self.store = store
        self.ttl_seconds = config.ttl_seconds
        self.key_prefix = config.key_prefix
        self.supports_prefix_delete = isinstance(store, PrefixDeletableCacheStore)

        log.info(
            f"Derived-view cache initialized (ttl={self.ttl_seconds}s, "
            f"prefix_delete={self.supports_prefix_delete})"
        )

    # === Keys ===

    def _make_key(self, *parts: Any) -> str:
        return self.key_prefix + ":".join(str(p) for p in parts)

    def checklist_key(self, country: str) -> str:
        return self._make_key("checklist", "country", normalize_country(country))

    def employee_page_key(self, country: str, page: int, per_page: int) -> str:
        return self._make_key("employees", normalize_country(country), page, per_page)

    def employee_key(self, country: str, employee_id: int) -> str:
        return self._make_key("employees", normalize_country(country), employee_id)

    def employee_scope_prefix(self, country: str) -> str:
        return self._make_key("employees", normalize_country(country), "")

    # === Read-through ===

    async def get_or_compute(
            self,
            key: str,
            compute: Callable[[], Awaitable[Any]],
            ttl: Optional[int] = None,
            view: str = "view",
    ) -> Any:
        """Return the cached value for ``key`` or compute, store and return it.

        A failing cache backend degrades to computing on every call. Errors
        raised by ``compute`` propagate and nothing is stored.
        """
        try:
            cached = await self.store.get(key)
        except CacheUnavailableError as e:
            log.warning(f"Cache read failed, computing {key} directly: {e}")
            derived_view_cache_requests_total.labels(view=view, result="error").inc()
            cached = None
        else:
            if cached is not None:
                try:
                    value = json.loads(cached)
                except json.JSONDecodeError:
                    log.error(f"Invalid JSON in cache for {key}, recomputing")
                else:
                    derived_view_cache_requests_total.labels(view=view, result="hit").inc()
                    return value
            derived_view_cache_requests_total.labels(view=view, result="miss").inc()

        start = time.monotonic()
        value = await compute()
        log.debug(f"Computed {key} in {(time.monotonic() - start) * 1000:.1f}ms")

        try:
            await self.store.set(key, json.dumps(value, default=str), ttl or self.ttl_seconds)
        except CacheUnavailableError as e:
            log.warning(f"Cache write failed for {key}: {e}")

        return value

    # === Invalidation ===

    async def invalidate_country(self, country: str) -> int:
        """Remove every derived view scoped to ``country``.

        Returns the number of keys removed. Raises CacheUnavailableError when
        the backend fails so the caller can retry.
        """
        removed = 1 if await self.store.delete(self.checklist_key(country)) else 0

        if not self.supports_prefix_delete:
            derived_view_cache_invalidations_total.labels(mode="ttl_only").inc()
            log.debug(f"Store cannot delete by prefix; employee views for {country} expire by TTL")
            return removed

        removed += await self.store.delete_by_prefix(self.employee_scope_prefix(country))
        derived_view_cache_invalidations_total.labels(mode="prefix").inc()
        return removed
