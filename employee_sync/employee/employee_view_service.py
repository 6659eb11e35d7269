# =============================================================================
# File: employee_sync/employee/employee_view_service.py
# Description: Cached employee list and detail views
# =============================================================================

from typing import Any, Dict

from employee_sync.checklist.validator import normalize_country
from employee_sync.config.hr_service_config import HrServiceConfig
from employee_sync.employee.ports.employee_directory_port import EmployeeDirectoryPort
from employee_sync.infra.persistence.cache_manager import DerivedViewCache


class EmployeeViewService:
    """Employee pages and single employees for one country, read through the cache.

    Country aliases are resolved before both the cache lookup and the upstream
    query, so every spelling of a country shares one set of entries.
    """

    def __init__(self, cache: DerivedViewCache, directory: EmployeeDirectoryPort, config: HrServiceConfig):
        self.cache = cache
        self.directory = directory
        self.default_per_page = config.default_per_page
        self.max_per_page = config.max_per_page

    def clamp_per_page(self, per_page: int = None) -> int:
        if per_page is None:
            return self.default_per_page
        return max(1, min(self.max_per_page, per_page))

    async def list_employees(self, country: str, page: int = 1, per_page: int = None) -> Dict[str, Any]:
        country = normalize_country(country)
        page = max(1, page)
        per_page = self.clamp_per_page(per_page)

        async def compute() -> Dict[str, Any]:
            result = await self.directory.get_employees(country, page, per_page)
            return {"data": result.get("data") or [], "meta": result.get("meta") or {}}

        key = self.cache.employee_page_key(country, page, per_page)
        return await self.cache.get_or_compute(key, compute, view="employee_page")

    async def get_employee(self, country: str, employee_id: int) -> Dict[str, Any]:
        country = normalize_country(country)

        async def compute() -> Dict[str, Any]:
            return {"data": await self.directory.get_employee(employee_id, country)}

        key = self.cache.employee_key(country, employee_id)
        return await self.cache.get_or_compute(key, compute, view="employee")
