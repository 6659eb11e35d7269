# =============================================================================
# File: employee_sync/checklist/computation.py
# Description: Country-wide checklist aggregation over an employee set
# =============================================================================

from __future__ import annotations

from typing import Any, Iterable, Mapping

from employee_sync.checklist.models import (
    ChecklistSummary,
    CountryChecklist,
    EmployeeChecklist,
    round_half_up,
)
from employee_sync.checklist.validator import validate


def display_name(employee: Mapping[str, Any]) -> str:
    return f"{employee.get('name') or ''} {employee.get('last_name') or ''}".strip()


def compute_country_checklist(employees: Iterable[Mapping[str, Any]], country: str) -> CountryChecklist:
    """Validate every employee and summarize how many are complete."""
    rows = []
    for employee in employees:
        result = validate(employee, country)
        rows.append(EmployeeChecklist(
            id=employee.get("id"),
            name=display_name(employee),
            fields=result.fields,
            completion_percentage=result.completion_percentage,
            complete=result.complete,
        ))

    total = len(rows)
    complete = sum(1 for row in rows if row.complete)
    overall = ChecklistSummary(
        total=total,
        complete=complete,
        percentage=round_half_up(100 * complete / total) if total else 0,
    )
    return CountryChecklist(country=country, overall=overall, employees=rows)
