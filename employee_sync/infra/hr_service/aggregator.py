# =============================================================================
# File: employee_sync/infra/hr_service/aggregator.py
# Description: Sequential page walker assembling a country's full employee set
# =============================================================================

import logging
from typing import Any, Dict, List, Optional

from employee_sync.config.hr_service_config import HrServiceConfig
from employee_sync.employee.ports.employee_directory_port import EmployeeDirectoryPort

log = logging.getLogger("employee_sync.infra.hr_service.aggregator")


def _last_page(meta: Any) -> int:
    """Read meta.last_page; missing, zero or garbage counts as a single page."""
    if not isinstance(meta, dict):
        return 1
    try:
        last_page = int(meta.get("last_page") or 1)
    except (TypeError, ValueError):
        return 1
    return max(last_page, 1)


class UpstreamAggregator:
    """
    Walks the paged employee listing from page 1 until ``meta.last_page``.

    Pages are fetched strictly one after another. The loop bound is read from
    each page, so a listing that grows or shrinks while being walked ends on
    the last page the most recent response announced.
    """

    def __init__(self, directory: EmployeeDirectoryPort, page_size: int = 100):
        self.directory = directory
        self.page_size = page_size

    @classmethod
    def from_config(cls, directory: EmployeeDirectoryPort, config: HrServiceConfig) -> "UpstreamAggregator":
        return cls(directory, page_size=config.aggregate_page_size)

    async def fetch_all(self, country: Optional[str] = None) -> List[Dict[str, Any]]:
        employees: List[Dict[str, Any]] = []
        page = 1

        while True:
            result = await self.directory.get_employees(country, page, self.page_size)
            employees.extend(result.get("data") or [])
            last_page = _last_page(result.get("meta"))
            page += 1
            if page > last_page:
                break

        log.debug(f"Aggregated {len(employees)} employees for {country} over {page - 1} page(s)")
        return employees
