# =============================================================================
# File: employee_sync/checklist/models.py
# Description: Checklist Result Models
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Any, Dict


@dataclass(frozen=True)
class FieldCheck:
    """Outcome of one country rule applied to one employee attribute"""
    field: str
    label: str
    complete: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "label": self.label,
            "complete": self.complete,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Checklist for a single employee under a single country"""
    country: str
    fields: List[FieldCheck] = field(default_factory=list)

    @property
    def complete_count(self) -> int:
        return sum(1 for f in self.fields if f.complete)

    @property
    def completion_percentage(self) -> int:
        if not self.fields:
            return 0
        return round_half_up(100 * self.complete_count / len(self.fields))

    @property
    def complete(self) -> bool:
        # Vacuously true for a country without rules
        return self.complete_count == len(self.fields)

    @property
    def missing_messages(self) -> List[str]:
        return [f.message for f in self.fields if not f.complete]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "complete": self.complete,
            "fields": [f.to_dict() for f in self.fields],
            "completion_percentage": self.completion_percentage,
        }


@dataclass(frozen=True)
class EmployeeChecklist:
    """Per-employee row of the country checklist"""
    id: Optional[Any]
    name: str
    fields: List[FieldCheck]
    completion_percentage: int
    complete: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "completion_percentage": self.completion_percentage,
            "complete": self.complete,
        }


@dataclass(frozen=True)
class ChecklistSummary:
    """Country-wide completeness totals"""
    total: int
    complete: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "complete": self.complete, "percentage": self.percentage}


@dataclass(frozen=True)
class CountryChecklist:
    """Aggregate checklist for every employee of a country"""
    country: str
    overall: ChecklistSummary
    employees: List[EmployeeChecklist] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "overall": self.overall.to_dict(),
            "employees": [e.to_dict() for e in self.employees],
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (non-negative inputs)"""
    return int(value + 0.5)
