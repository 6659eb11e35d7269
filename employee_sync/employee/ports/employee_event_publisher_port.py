# =============================================================================
# File: employee_sync/employee/ports/employee_event_publisher_port.py
# Description: Port interface for publishing committed employee mutations
# Pattern: Hexagonal Architecture / Ports & Adapters
# =============================================================================

from __future__ import annotations

from typing import Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from employee_sync.employee.events import EmployeeEventEnvelope


@runtime_checkable
class EmployeeEventPublisherPort(Protocol):
    """
    Port: Employee Event Publishing

    Implemented by: BrokerEmployeeEventPublisher (employee_sync/employee/event_publisher.py)

    publish() must never raise: the mutation it describes is already
    committed, and a lost event is tolerated because derived views expire.
    """

    async def publish(self, envelope: 'EmployeeEventEnvelope') -> bool:
        """
        Hand one envelope to the transport.

        Returns:
            True if the broker accepted the message, False if publishing failed
        """
        ...
