# =============================================================================
# File: employee_sync/common/base/base_model.py
# Description: Base Pydantic model for broker-published events
# =============================================================================

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

from pydantic import BaseModel, Field, ConfigDict


class BaseEvent(BaseModel):
    """
    Base Pydantic model for events published to the broker.
    Ensures common metadata fields are present in every event.
    """
    event_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: str  # Narrowed by concrete event types
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        frozen=True,  # Events are immutable facts
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_dict_for_bus(self) -> Dict[str, Any]:
        """
        Serializes the event to a dictionary suitable for publishing to the broker,
        converting UUID and datetime to strings.
        """
        event_dict = self.model_dump(mode="json", by_alias=True)
        event_dict["event_id"] = str(self.event_id)
        event_dict["timestamp"] = self.timestamp.isoformat()
        return event_dict
