# =============================================================================
# File: employee_sync/infra/event_bus/transport_adapter.py
# Description: Abstract adapter interface for the employee event broker
# =============================================================================
"""
Abstract async transport adapter for employee event delivery.

Delivery contract offered to consumers:
- at-least-once: a message may arrive more than once, and out of order
  relative to other in-flight messages
- explicit acknowledgment per message
- bounded in-flight work through prefetch
"""
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, NamedTuple, Optional

from employee_sync.common.enums.enums import ProcessingOutcome

MessageHandler = Callable[[bytes], Awaitable[ProcessingOutcome]]


class HealthCheck(NamedTuple):
    """Health check information for transport adapters"""
    is_healthy: bool
    details: Dict[str, Any]


class TransportAdapter(ABC):
    """
    Abstract base transport adapter.

    IMPORTANT: consume() blocks until the consumer is cancelled or the broker
    connection is lost. The handler decides the terminal state of every
    delivery; the adapter only carries it out (ack or nack with requeue).
    """

    @abstractmethod
    async def publish(
            self,
            routing_key: str,
            body: bytes,
            message_id: Optional[str] = None
    ) -> None:
        """
        Publish one persistent message to the topic exchange.
        """

    @abstractmethod
    async def consume(self, handler: MessageHandler) -> None:
        """
        Receive deliveries one at a time and settle each according to the
        handler's outcome. Blocks until cancelled.
        """

    @abstractmethod
    async def pull(self, handler: MessageHandler, limit: Optional[int] = None) -> int:
        """
        Drain the queue on demand. Stops when the queue is empty, the limit is
        reached, or a delivery is requeued. Returns the number of deliveries handled.
        """

    async def health_check(self) -> HealthCheck:
        """
        Check the health of the underlying transport.
        Default implementation assumes health if no override.
        """
        return HealthCheck(is_healthy=True, details={"status": "default implementation"})

    async def ping(self) -> bool:
        """
        Simple connectivity check to the underlying transport.
        """
        return True
