# =============================================================================
# File: employee_sync/employee/event_publisher.py
# Description: Fire-and-forget publisher and post-commit emitter for employee events
# =============================================================================

"""
Source-of-record side of the synchronization.

Mutation code calls the emitter explicitly once its transaction has
committed:

    employee = await repo.update(employee_id, changes)   # committed
    await emitter.updated(employee, changed_fields=list(changes))

Publishing never fails the mutation. Errors are logged and dropped; the
derived views on the hub fall back to TTL expiry.
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from employee_sync.common.enums.enums import EmployeeEventType
from employee_sync.employee.events import EmployeeEventEnvelope, build_employee_event
from employee_sync.employee.ports.employee_event_publisher_port import EmployeeEventPublisherPort
from employee_sync.infra.event_bus.transport_adapter import TransportAdapter
from employee_sync.infra.metrics.sync_metrics import employee_events_published_total

log = logging.getLogger("employee_sync.employee.publisher")


class BrokerEmployeeEventPublisher:
    """Publishes envelopes to the topic exchange as persistent messages."""

    def __init__(self, transport: TransportAdapter):
        self.transport = transport

    async def publish(self, envelope: EmployeeEventEnvelope) -> bool:
        try:
            await self.transport.publish(
                envelope.routing_key,
                envelope.to_message_body(),
                message_id=str(envelope.event_id),
            )
        except Exception as e:
            log.error(
                f"Failed to send {envelope.event_type} for employee {envelope.employee_id} "
                f"({envelope.country}) to RabbitMQ: {e}"
            )
            employee_events_published_total.labels(event_type=envelope.event_type, result="failed").inc()
            return False

        log.info(f"Published {envelope.event_type} for employee {envelope.employee_id} ({envelope.country})")
        employee_events_published_total.labels(event_type=envelope.event_type, result="published").inc()
        return True


class EmployeeEventEmitter:
    """Explicit post-commit hook: one envelope per committed mutation."""

    def __init__(self, publisher: EmployeeEventPublisherPort):
        self.publisher = publisher

    async def _emit(
            self,
            event_type: EmployeeEventType,
            employee: Mapping[str, Any],
            changed_fields: Optional[Sequence[str]] = None,
    ) -> Optional[EmployeeEventEnvelope]:
        try:
            envelope = build_employee_event(event_type, employee, changed_fields)
        except (KeyError, ValueError) as e:
            log.error(f"Cannot build {event_type.value} envelope: {e}")
            return None

        await self.publisher.publish(envelope)
        return envelope

    async def created(self, employee: Mapping[str, Any]) -> Optional[EmployeeEventEnvelope]:
        return await self._emit(EmployeeEventType.CREATED, employee)

    async def updated(
            self,
            employee: Mapping[str, Any],
            changed_fields: Sequence[str],
    ) -> Optional[EmployeeEventEnvelope]:
        return await self._emit(EmployeeEventType.UPDATED, employee, changed_fields)

    async def deleted(self, employee: Mapping[str, Any]) -> Optional[EmployeeEventEnvelope]:
        return await self._emit(EmployeeEventType.DELETED, employee)
