# =============================================================================
# File: employee_sync/checklist/checklist_service.py
# Description: Read path for the country checklist aggregate
# =============================================================================

import logging
from typing import Any, Dict

from employee_sync.checklist.computation import compute_country_checklist
from employee_sync.checklist.validator import normalize_country
from employee_sync.infra.hr_service.aggregator import UpstreamAggregator
from employee_sync.infra.persistence.cache_manager import DerivedViewCache

log = logging.getLogger("employee_sync.checklist.service")


class ChecklistService:
    """Serves ``checklist:country:{country}`` from cache, recomputing on a miss.

    UpstreamUnavailableError from the aggregator propagates to the caller;
    nothing is cached in that case.
    """

    def __init__(self, cache: DerivedViewCache, aggregator: UpstreamAggregator):
        self.cache = cache
        self.aggregator = aggregator

    async def get_country_checklist(self, country: str) -> Dict[str, Any]:
        # Upstream filters by exact country name; query with the same name the key uses
        country = normalize_country(country)

        async def compute() -> Dict[str, Any]:
            employees = await self.aggregator.fetch_all(country)
            checklist = compute_country_checklist(employees, country)
            log.info(
                f"Checklist computed for {country}: "
                f"{checklist.overall.complete}/{checklist.overall.total} complete"
            )
            return checklist.to_dict()

        return await self.cache.get_or_compute(self.cache.checklist_key(country), compute, view="checklist")
