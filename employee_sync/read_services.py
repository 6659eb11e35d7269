# =============================================================================
# File: employee_sync/read_services.py
# Description: Composition root for the hub's cached read path
# =============================================================================

"""
Read Services

Wires the read side from configuration, for whatever HTTP layer serves it:

    HrServiceClient ─→ UpstreamAggregator ─→ ChecklistService    (checklist:country:{c})
          └───────────────────────────────→ EmployeeViewService (employees:{c}:...)
                         both read through DerivedViewCache (Redis)

The consumer side is wired separately by the employee event worker; both
share key templates through DerivedViewCache, which is what lets an
invalidation on one side force a recompute on the other.
"""

import logging
from typing import Any, Optional

import httpx

from employee_sync.checklist.checklist_service import ChecklistService
from employee_sync.config.cache_config import CacheConfig, get_cache_config
from employee_sync.config.hr_service_config import HrServiceConfig, get_hr_service_config
from employee_sync.config.redis_config import RedisConfig, get_redis_config
from employee_sync.employee.employee_view_service import EmployeeViewService
from employee_sync.infra.hr_service import HrServiceClient, UpstreamAggregator
from employee_sync.infra.persistence.cache_manager import DerivedViewCache
from employee_sync.infra.persistence.cache_store import RedisCacheStore
from employee_sync.infra.persistence.redis_client import close_redis_client, create_redis_client

log = logging.getLogger("employee_sync.read_services")


class ReadServices:
    """Checklist and employee view services built from configuration."""

    def __init__(
            self,
            hr_config: Optional[HrServiceConfig] = None,
            redis_config: Optional[RedisConfig] = None,
            cache_config: Optional[CacheConfig] = None,
    ):
        self.hr_config = hr_config or get_hr_service_config()
        self.redis_config = redis_config or get_redis_config()
        self.cache_config = cache_config or get_cache_config()

        self.redis_client: Any = None
        self.cache: Optional[DerivedViewCache] = None
        self.hr_client: Optional[HrServiceClient] = None
        self.aggregator: Optional[UpstreamAggregator] = None
        self.checklist: Optional[ChecklistService] = None
        self.employees: Optional[EmployeeViewService] = None

        self._owns_redis_client = False

    async def initialize(self, redis_client: Any = None, http_client: Optional[httpx.AsyncClient] = None) -> None:
        """Build the services. Injected clients are used as-is and not closed on close()."""
        if redis_client is None:
            redis_client = create_redis_client(self.redis_config)
            self._owns_redis_client = True
        self.redis_client = redis_client

        store = RedisCacheStore(redis_client, scan_count=self.redis_config.scan_count)
        self.cache = DerivedViewCache(store, self.cache_config)

        self.hr_client = HrServiceClient(self.hr_config, client=http_client)
        self.aggregator = UpstreamAggregator.from_config(self.hr_client, self.hr_config)
        self.checklist = ChecklistService(self.cache, self.aggregator)
        self.employees = EmployeeViewService(self.cache, self.hr_client, self.hr_config)

        log.info(
            f"Read services initialized (hr_service={self.hr_config.base_url}, "
            f"page_size={self.aggregator.page_size}, ttl={self.cache_config.ttl_seconds}s)"
        )

    async def close(self) -> None:
        if self.hr_client is not None:
            await self.hr_client.close()
        if self.redis_client is not None and self._owns_redis_client:
            await close_redis_client(self.redis_client)
        self.redis_client = None
        log.info("Read services closed")
