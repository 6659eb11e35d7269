# =============================================================================
# File: employee_sync/employee/ports/employee_directory_port.py
# Description: Port interface for reading employees from the system of record
# Pattern: Hexagonal Architecture / Ports & Adapters
# =============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class EmployeeDirectoryPort(Protocol):
    """
    Port: Employee Directory (read side of the HR service)

    Implemented by: HrServiceClient (employee_sync/infra/hr_service/adapter.py)
    """

    async def get_employees(
        self,
        country: Optional[str] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Dict[str, Any]:
        """
        Fetch one page of employees.

        Returns:
            {"data": [employee, ...], "meta": {"current_page": .., "last_page": .., ...}}

        Raises:
            UpstreamUnavailableError: the HR service could not serve the page
        """
        ...

    async def get_employee(
        self,
        employee_id: int,
        country: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch a single employee record (the unwrapped ``data`` object).

        Raises:
            EmployeeNotFoundError: no such employee
            UpstreamUnavailableError: the HR service could not serve the record
        """
        ...
