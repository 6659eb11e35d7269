# =============================================================================
# File: employee_sync/employee/events.py
# Description: Employee event envelope published after a committed mutation
# =============================================================================

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from employee_sync.common.base.base_model import BaseEvent
from employee_sync.common.enums.enums import EmployeeEventType


class EmployeeEventData(BaseModel):
    """Body of an employee event: which record, which fields, full snapshot"""

    employee_id: int
    changed_fields: List[str] = Field(default_factory=list)
    employee: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class EmployeeEventEnvelope(BaseEvent):
    """
    Wire format:

        {"event_type": "EmployeeUpdated", "event_id": "<uuid>",
         "timestamp": "<ISO-8601>", "country": "USA",
         "data": {"employee_id": 1, "changed_fields": ["salary"],
                  "employee": {...}}}

    event_id is unique per publish and carries no deduplication meaning.
    """

    event_type: EmployeeEventType
    country: str
    data: EmployeeEventData

    @model_validator(mode="after")
    def _changed_fields_only_for_updates(self) -> "EmployeeEventEnvelope":
        if self.event_type != EmployeeEventType.UPDATED.value and self.data.changed_fields:
            raise ValueError("changed_fields is only populated for EmployeeUpdated events")
        return self

    @property
    def employee_id(self) -> int:
        return self.data.employee_id

    @property
    def routing_key(self) -> str:
        return EmployeeEventType(self.event_type).routing_key

    def to_message_body(self) -> bytes:
        """UTF-8 JSON body for the broker"""
        return json.dumps(self.to_dict_for_bus(), ensure_ascii=False, default=str).encode("utf-8")


def build_employee_event(
        event_type: EmployeeEventType,
        employee: Mapping[str, Any],
        changed_fields: Optional[Sequence[str]] = None,
) -> EmployeeEventEnvelope:
    """
    Construct the envelope for one committed mutation.

    Args:
        event_type: Created, Updated or Deleted
        employee: Attribute snapshot at publish time; must contain ``id`` and ``country``
        changed_fields: Names of modified attributes; kept only for updates
    """
    snapshot = dict(employee)
    fields = list(dict.fromkeys(changed_fields or [])) if event_type is EmployeeEventType.UPDATED else []

    return EmployeeEventEnvelope(
        event_type=event_type,
        country=snapshot["country"],
        data=EmployeeEventData(
            employee_id=snapshot["id"],
            changed_fields=fields,
            employee=snapshot,
        ),
    )
