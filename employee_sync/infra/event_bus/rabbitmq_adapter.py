# =============================================================================
# File: employee_sync/infra/event_bus/rabbitmq_adapter.py
# Description: RabbitMQ transport adapter for employee events
# =============================================================================
"""
RabbitMQ transport.

Topology (declared idempotently on every session):

    exchange  hr.events            topic, durable
    queue     hub.employee.events  durable
    binding   employee.#

Every broker interaction runs inside ``session()``: the connection and
channel are acquired on entry and released on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, NamedTuple, Optional

import aio_pika
from aio_pika import DeliveryMode, ExchangeType, Message
from aio_pika.abc import AbstractChannel, AbstractExchange, AbstractIncomingMessage, AbstractQueue
from aio_pika.exceptions import AMQPError

from employee_sync.common.enums.enums import ProcessingOutcome
from employee_sync.common.exceptions.exceptions import BrokerUnavailableError
from employee_sync.config.rabbitmq_config import RabbitMQConfig
from employee_sync.infra.event_bus.transport_adapter import HealthCheck, MessageHandler, TransportAdapter

log = logging.getLogger("employee_sync.event_bus.rabbitmq")

Connect = Callable[..., Awaitable[Any]]


class BrokerSession(NamedTuple):
    """Channel and declared exchange for the lifetime of one session"""
    channel: AbstractChannel
    exchange: AbstractExchange


class RabbitMQTransportAdapter(TransportAdapter):
    """
    aio-pika based adapter.

    Consumers get ``prefetch_count`` unacknowledged deliveries at most (1 by
    default), so one process never works on two messages at once. Throughput
    scales by running more consumer processes on the same queue.
    """

    def __init__(self, config: RabbitMQConfig, connect: Connect = aio_pika.connect):
        self.config = config
        self._connect = connect

    # =========================================================================
    # Session management
    # =========================================================================

    @asynccontextmanager
    async def session(self, for_consuming: bool = False) -> AsyncIterator[BrokerSession]:
        """Acquire connection + channel, declare the exchange, always release."""
        try:
            connection = await self._connect(
                host=self.config.host,
                port=self.config.port,
                login=self.config.user,
                password=self.config.get_password(),
                virtualhost=self.config.vhost,
                timeout=self.config.connection_timeout_seconds,
            )
        except (AMQPError, OSError, asyncio.TimeoutError) as e:
            raise BrokerUnavailableError(
                f"Cannot connect to RabbitMQ at {self.config.host}:{self.config.port}: {e}"
            ) from e

        try:
            channel = await connection.channel()
            try:
                if for_consuming:
                    await channel.set_qos(prefetch_count=self.config.prefetch_count)
                exchange = await channel.declare_exchange(
                    self.config.exchange,
                    ExchangeType.TOPIC,
                    durable=True,
                )
                yield BrokerSession(channel=channel, exchange=exchange)
            finally:
                await self._close_quietly(channel, "channel")
        finally:
            await self._close_quietly(connection, "connection")

    @staticmethod
    async def _close_quietly(resource: Any, name: str) -> None:
        try:
            await resource.close()
        except (AMQPError, OSError, asyncio.TimeoutError) as e:
            log.warning(f"Error closing RabbitMQ {name}: {e}")

    async def _declare_queue(self, session: BrokerSession) -> AbstractQueue:
        queue = await session.channel.declare_queue(self.config.queue, durable=True)
        await queue.bind(session.exchange, routing_key=self.config.binding_key)
        return queue

    # =========================================================================
    # Publishing
    # =========================================================================

    async def publish(
            self,
            routing_key: str,
            body: bytes,
            message_id: Optional[str] = None
    ) -> None:
        message = Message(
            body=body,
            content_type="application/json",
            content_encoding="utf-8",
            delivery_mode=DeliveryMode.PERSISTENT,
            message_id=message_id,
        )
        async with self.session() as session:
            await session.exchange.publish(message, routing_key=routing_key)
        log.debug(f"Published {routing_key} to {self.config.exchange} (message_id={message_id})")

    # =========================================================================
    # Consuming
    # =========================================================================

    async def _settle(self, message: AbstractIncomingMessage, handler: MessageHandler) -> ProcessingOutcome:
        try:
            outcome = await handler(message.body)
        except Exception as e:
            log.error(f"Handler raised for delivery {message.delivery_tag}: {e}", exc_info=True)
            outcome = ProcessingOutcome.REQUEUED

        if outcome is ProcessingOutcome.REQUEUED:
            await message.nack(requeue=True)
        else:
            await message.ack()
        return outcome

    async def consume(self, handler: MessageHandler) -> None:
        async with self.session(for_consuming=True) as session:
            queue = await self._declare_queue(session)
            log.info(
                f"Listening on queue {self.config.queue} "
                f"(exchange: {self.config.exchange}, routing: {self.config.binding_key}, "
                f"prefetch: {self.config.prefetch_count})"
            )
            async with queue.iterator() as queue_iter:
                async for message in queue_iter:
                    await self._settle(message, handler)

    async def pull(self, handler: MessageHandler, limit: Optional[int] = None) -> int:
        processed = 0
        async with self.session(for_consuming=True) as session:
            queue = await self._declare_queue(session)
            log.info(f"Pulling from queue {self.config.queue}" + (f" (limit: {limit})" if limit is not None else ""))

            while limit is None or processed < limit:
                message = await queue.get(no_ack=False, fail=False)
                if message is None:
                    if processed == 0:
                        log.info("No messages in queue")
                    break

                outcome = await self._settle(message, handler)
                processed += 1

                # A requeued message goes back to the head of the queue
                if outcome is ProcessingOutcome.REQUEUED:
                    log.warning("Delivery requeued, stopping pull")
                    break

        return processed

    # =========================================================================
    # Health
    # =========================================================================

    async def ping(self) -> bool:
        try:
            async with self.session():
                return True
        except BrokerUnavailableError as e:
            log.warning(f"RabbitMQ ping failed: {e}")
            return False

    async def health_check(self) -> HealthCheck:
        start = time.monotonic()
        healthy = await self.ping()
        return HealthCheck(
            is_healthy=healthy,
            details={
                "host": self.config.host,
                "exchange": self.config.exchange,
                "queue": self.config.queue,
                "latency_ms": round((time.monotonic() - start) * 1000, 2),
            },
        )
