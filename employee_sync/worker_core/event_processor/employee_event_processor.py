# =============================================================================
# File: employee_sync/worker_core/event_processor/employee_event_processor.py
# Description: Decode → invalidate → broadcast pipeline for employee events
# =============================================================================

"""
Employee Event Processor

Per delivery:

    Received → Decode ─┬─ malformed ──────────────────────────→ DROPPED   (ack)
                       └─ decoded → Invalidate → Broadcast ───→ ACKNOWLEDGED (ack)
                                        └── any error ────────→ REQUEUED  (nack, requeue)

Redelivery is safe: invalidation deletes keys if present and duplicate
notifications are harmless to subscribers. event_id is never used for
deduplication.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from employee_sync.checklist.validator import validate
from employee_sync.common.enums.enums import ProcessingOutcome
from employee_sync.common.exceptions.exceptions import MalformedPayloadError
from employee_sync.infra.metrics.sync_metrics import (
    employee_event_processing_seconds,
    employee_events_processed_total,
)
from employee_sync.infra.persistence.cache_manager import DerivedViewCache
from employee_sync.wse.publishers.change_notifier import ChangeNotifier

log = logging.getLogger("employee_sync.worker_core.event_processor")


class EmployeeEventMessage(BaseModel):
    """Consumer view of an employee event: only event_type and country are required."""

    event_type: str
    country: str
    event_id: Any = None
    data: Any = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("event_type", "country")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


def decode_message(body: bytes) -> EmployeeEventMessage:
    """Parse a UTF-8 JSON body. Raises MalformedPayloadError."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedPayloadError(f"Event body is not UTF-8: {e}") from e

    try:
        return EmployeeEventMessage.model_validate_json(text)
    except ValidationError as e:
        reasons = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise MalformedPayloadError(f"Invalid event payload: {reasons}") from e


def snapshot_from(data: Any) -> Optional[dict]:
    """The employee snapshot carried by the event, if any.

    Delete events may carry an empty snapshot. A missing or null
    ``employee`` falls back to the outer data.
    """
    if isinstance(data, dict) and data.get("employee") is not None:
        data = data["employee"]
    if isinstance(data, dict) and data:
        return data
    return None


def missing_fields_for(country: str, data: Any) -> List[str]:
    snapshot = snapshot_from(data)
    if snapshot is None:
        return []
    return validate(snapshot, country).missing_messages


class EmployeeEventProcessor:
    """Settles one delivery at a time; never raises to the transport."""

    def __init__(
            self,
            cache: DerivedViewCache,
            notifier: ChangeNotifier,
            processing_timeout_seconds: Optional[float] = None,
    ):
        self.cache = cache
        self.notifier = notifier
        self.processing_timeout_seconds = processing_timeout_seconds

    async def process(self, event: EmployeeEventMessage) -> None:
        """Invalidate the country's derived views, then broadcast the change."""
        removed = await self.cache.invalidate_country(event.country)
        log.info(f"Invalidated {removed} cached view(s) for country: {event.country}")

        missing = missing_fields_for(event.country, event.data)
        await self.notifier.checklist_updated(event.country, event.event_type, missing)
        await self.notifier.employee_data_updated(event.country, event.event_type, event.data)

    async def handle_message(self, body: bytes) -> ProcessingOutcome:
        start = time.monotonic()
        outcome = await self._handle(body)
        employee_event_processing_seconds.observe(time.monotonic() - start)
        employee_events_processed_total.labels(outcome=outcome.value).inc()
        return outcome

    async def _handle(self, body: bytes) -> ProcessingOutcome:
        try:
            event = decode_message(body)
        except MalformedPayloadError as e:
            log.warning(f"Dropping malformed employee event: {e}")
            return ProcessingOutcome.DROPPED

        log.info(f"Processing {event.event_type} for country {event.country} (event_id={event.event_id})")

        try:
            if self.processing_timeout_seconds:
                await asyncio.wait_for(self.process(event), timeout=self.processing_timeout_seconds)
            else:
                await self.process(event)
        except Exception as e:
            log.error(
                f"Failed to process {event.event_type} for {event.country} "
                f"(event_id={event.event_id}), requeueing: {e}",
                exc_info=True,
            )
            return ProcessingOutcome.REQUEUED

        return ProcessingOutcome.ACKNOWLEDGED
