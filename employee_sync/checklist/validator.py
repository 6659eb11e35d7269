# =============================================================================
# File: employee_sync/checklist/validator.py
# Description: Country-specific completeness rules for employee records
# =============================================================================

"""
Completeness Validator

Pure scoring of one employee snapshot against a country's rule set:

    USA:      ssn (non-blank), salary (> 0), address (non-blank)
    Germany:  salary (> 0), goal (non-blank), tax_id (DE + 9 digits)
    other:    no rules

Country names are normalized case-insensitively; unrecognized names are
kept verbatim and get an empty rule list, which makes every employee of
such a country vacuously complete with a completion percentage of 0.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Tuple

from employee_sync.checklist.models import FieldCheck, ValidationResult
from employee_sync.common.enums.enums import Country

TAX_ID_PATTERN = re.compile(r"DE[0-9]{9}")

COUNTRY_ALIASES: Dict[str, str] = {
    "USA": Country.USA.value,
    "DE": Country.GERMANY.value,
    "DEU": Country.GERMANY.value,
    "GERMANY": Country.GERMANY.value,
}


def _is_filled(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    return bool(str(value).strip())


def _is_positive_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False


def _is_german_tax_id(value: Any) -> bool:
    if value is None:
        return False
    return TAX_ID_PATTERN.fullmatch(str(value)) is not None


Rule = Tuple[str, str, Callable[[Any], bool]]

RULES: Dict[str, List[Rule]] = {
    Country.USA.value: [
        ("ssn", "SSN", _is_filled),
        ("salary", "Salary", _is_positive_number),
        ("address", "Address", _is_filled),
    ],
    Country.GERMANY.value: [
        ("salary", "Salary", _is_positive_number),
        ("goal", "Goal", _is_filled),
        ("tax_id", "Tax ID", _is_german_tax_id),
    ],
}


def normalize_country(country: str) -> str:
    """Map a country alias to its canonical name; unknown names pass through."""
    return COUNTRY_ALIASES.get(str(country).strip().upper(), country)


def rules_for(country: str) -> List[Rule]:
    return RULES.get(normalize_country(country), [])


def check_field(employee: Mapping[str, Any], key: str, label: str, is_valid: Callable[[Any], bool]) -> FieldCheck:
    complete = is_valid(employee.get(key))
    return FieldCheck(
        field=key,
        label=label,
        complete=complete,
        message=f"{label} is complete" if complete else f"{label} is required or invalid",
    )


def validate(employee: Mapping[str, Any], country: str) -> ValidationResult:
    """Score one employee snapshot against the rules of ``country``.

    Deterministic and side-effect free: the snapshot is only read.
    """
    canonical = normalize_country(country)
    fields = [check_field(employee, key, label, is_valid) for key, label, is_valid in rules_for(canonical)]
    return ValidationResult(country=canonical, fields=fields)
