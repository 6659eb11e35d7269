# =============================================================================
# File: tests/fakes/fake_hr_directory.py
# Description: Fake implementation of EmployeeDirectoryPort for unit testing
# Pattern: Ports & Adapters - Fake/Stub adapter
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from employee_sync.common.exceptions.exceptions import EmployeeNotFoundError, UpstreamUnavailableError

_UNSET = object()


@dataclass
class CallRecord:
    """Record of a method call for verification."""
    method: str
    args: tuple
    kwargs: Dict[str, Any]
    result: Any = None


class FakeHrDirectory:
    """
    Fake of the HR service read API.

    Employees are stored in memory and paged the way the real listing is:
    ``{"data": [...], "meta": {"current_page", "last_page", "per_page", "total"}}``.

    Usage:
        directory = FakeHrDirectory()
        directory.add_employee({"id": 1, "country": "USA", "ssn": "123"})
        page = await directory.get_employees("USA", page=1, per_page=15)
        assert directory.get_call_count("get_employees") == 1
    """

    def __init__(self):
        self.employees: List[Dict[str, Any]] = []

        # Call tracking
        self._calls: List[CallRecord] = []

        # Configurable responses
        self._should_fail: Dict[str, str] = {}
        self._meta_override: Any = _UNSET

    # =========================================================================
    # Test Setup Methods
    # =========================================================================

    def add_employee(self, employee: Dict[str, Any]) -> None:
        self.employees.append(dict(employee))

    def add_employees(self, country: str, count: int, **attributes: Any) -> None:
        """Add ``count`` employees of ``country`` with sequential ids."""
        start = len(self.employees) + 1
        for i in range(start, start + count):
            self.add_employee({"id": i, "country": country, "name": f"Emp{i}", **attributes})

    def configure_failure(self, method: str, error_message: str = "HR service unreachable") -> None:
        """Make ``method`` raise UpstreamUnavailableError."""
        self._should_fail[method] = error_message

    def configure_meta(self, meta: Any) -> None:
        """Replace the pagination meta returned by every listing call."""
        self._meta_override = meta

    def clear(self) -> None:
        """Reset all state between tests."""
        self.employees.clear()
        self._calls.clear()
        self._should_fail.clear()
        self._meta_override = _UNSET

    # =========================================================================
    # EmployeeDirectoryPort
    # =========================================================================

    async def get_employees(
            self,
            country: Optional[str] = None,
            page: int = 1,
            per_page: int = 15
    ) -> Dict[str, Any]:
        self._record_call("get_employees", country, page, per_page)
        self._check_failure("get_employees")

        matching = [e for e in self.employees if country is None or e.get("country") == country]
        start = (page - 1) * per_page
        meta = {
            "current_page": page,
            "last_page": max(1, math.ceil(len(matching) / per_page)),
            "per_page": per_page,
            "total": len(matching),
        }
        if self._meta_override is not _UNSET:
            meta = self._meta_override
        return {"data": matching[start:start + per_page], "meta": meta}

    async def get_employee(self, employee_id: int, country: Optional[str] = None) -> Dict[str, Any]:
        self._record_call("get_employee", employee_id, country)
        self._check_failure("get_employee")

        for employee in self.employees:
            if employee.get("id") == employee_id and (country is None or employee.get("country") == country):
                return employee
        raise EmployeeNotFoundError(employee_id, country)

    # =========================================================================
    # Test Verification Methods
    # =========================================================================

    def was_called(self, method: str) -> bool:
        return any(c.method == method for c in self._calls)

    def get_call_count(self, method: str) -> int:
        return sum(1 for c in self._calls if c.method == method)

    def get_calls(self, method: str) -> List[CallRecord]:
        return [c for c in self._calls if c.method == method]

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _record_call(self, method: str, *args, **kwargs) -> None:
        self._calls.append(CallRecord(method=method, args=args, kwargs=kwargs))

    def _check_failure(self, method: str) -> None:
        if method in self._should_fail:
            raise UpstreamUnavailableError(self._should_fail[method])


# =============================================================================
# EOF
# =============================================================================
