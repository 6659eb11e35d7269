# =============================================================================
# File: employee_sync/workers/employee_event_worker.py
# Description: Hub-side worker consuming employee events from RabbitMQ
# =============================================================================

"""
Employee Event Worker

Wires the consumer side from configuration:

    RabbitMQ queue → EmployeeEventProcessor → DerivedViewCache (Redis)
                                            → ChangeNotifier   (Redis Pub/Sub)

Commands:
    consume            long-running loop, reconnects after broker failures
    pull --limit N     drain up to N deliveries and exit
    pull --once        drain a single delivery and exit
"""

import argparse
import asyncio
import logging
import os
import signal
import socket
import sys
from typing import Any, Optional

from aio_pika.exceptions import AMQPError

from employee_sync.common.exceptions.exceptions import BrokerUnavailableError
from employee_sync.config.cache_config import CacheConfig, get_cache_config
from employee_sync.config.logging_config import (
    setup_logging,
    log_worker_banner,
    log_status_update,
)
from employee_sync.config.rabbitmq_config import RabbitMQConfig, get_rabbitmq_config
from employee_sync.config.redis_config import RedisConfig, get_redis_config
from employee_sync.infra.event_bus.rabbitmq_adapter import RabbitMQTransportAdapter
from employee_sync.infra.event_bus.transport_adapter import TransportAdapter
from employee_sync.infra.persistence.cache_manager import DerivedViewCache
from employee_sync.infra.persistence.cache_store import RedisCacheStore
from employee_sync.infra.persistence.redis_client import close_redis_client, create_redis_client
from employee_sync.worker_core.event_processor.employee_event_processor import EmployeeEventProcessor
from employee_sync.wse.core.pubsub_bus import PubSubBus
from employee_sync.wse.publishers.change_notifier import ChangeNotifier

log = logging.getLogger("employee_sync.worker.employee_events")

SHUTDOWN_TIMEOUT_SECONDS = 30.0


class EmployeeEventWorker:
    """
    Consumer process for the hub.

    One worker handles one delivery at a time (prefetch from RabbitMQConfig).
    Scale by running more workers against the same queue.
    """

    def __init__(
            self,
            rabbitmq_config: Optional[RabbitMQConfig] = None,
            redis_config: Optional[RedisConfig] = None,
            cache_config: Optional[CacheConfig] = None,
    ):
        self.rabbitmq_config = rabbitmq_config or get_rabbitmq_config()
        self.redis_config = redis_config or get_redis_config()
        self.cache_config = cache_config or get_cache_config()
        self.instance_id = f"{socket.gethostname()}-{os.getpid()}"

        self.redis_client: Any = None
        self.cache: Optional[DerivedViewCache] = None
        self.processor: Optional[EmployeeEventProcessor] = None
        self.transport: Optional[TransportAdapter] = None

        self._owns_redis_client = False
        self._shutdown_event = asyncio.Event()
        self._signal_count = 0

    async def initialize(self, redis_client: Any = None, transport: Optional[TransportAdapter] = None) -> None:
        """Build the pipeline. Injected clients are used as-is and not closed on stop()."""
        if redis_client is None:
            redis_client = create_redis_client(self.redis_config)
            self._owns_redis_client = True
        self.redis_client = redis_client

        store = RedisCacheStore(redis_client, scan_count=self.redis_config.scan_count)
        self.cache = DerivedViewCache(store, self.cache_config)
        notifier = ChangeNotifier(PubSubBus(redis_client))
        self.processor = EmployeeEventProcessor(
            self.cache,
            notifier,
            processing_timeout_seconds=self.rabbitmq_config.processing_timeout_seconds,
        )
        self.transport = transport or RabbitMQTransportAdapter(self.rabbitmq_config)
        log.info("Employee event worker initialized")

    # =========================================================================
    # Commands
    # =========================================================================

    async def consume_forever(self) -> None:
        """Consume until shutdown, reconnecting after broker failures."""
        while not self._shutdown_event.is_set():
            try:
                await self.transport.consume(self.processor.handle_message)
                log.warning("Consumer stopped receiving deliveries, reconnecting")
            except (BrokerUnavailableError, AMQPError, OSError) as e:
                log.error(
                    f"Broker connection failed: {e}. "
                    f"Retrying in {self.rabbitmq_config.reconnect_delay_seconds}s"
                )

            try:
                await asyncio.wait_for(
                    self._shutdown_event.wait(),
                    timeout=self.rabbitmq_config.reconnect_delay_seconds,
                )
            except asyncio.TimeoutError:
                pass

    async def run_consume(self) -> None:
        consumer = asyncio.create_task(self.consume_forever())
        shutdown = asyncio.create_task(self._shutdown_event.wait())
        try:
            await asyncio.wait({consumer, shutdown}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (consumer, shutdown):
                task.cancel()
            await asyncio.gather(consumer, shutdown, return_exceptions=True)

    async def run_pull(self, limit: Optional[int] = None) -> int:
        processed = await self.transport.pull(self.processor.handle_message, limit=limit)
        log.info(f"Processed {processed} message(s)")
        return processed

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    def handle_signal(self, sig, frame):
        """
        1st signal: graceful shutdown
        2nd+ signal: force exit
        """
        self._signal_count += 1
        log.warning(f"Received signal {signal.Signals(sig).name} (count: {self._signal_count})")

        if self._signal_count == 1:
            log.warning("Initiating graceful shutdown...")
            self._shutdown_event.set()
        else:
            log.error("Multiple signals received - forcing immediate exit")
            os._exit(1)

    async def stop(self) -> None:
        if self.redis_client is not None and self._owns_redis_client:
            await close_redis_client(self.redis_client)
        self.redis_client = None
        log.info("Employee event worker stopped")


# =============================================================================
# Main Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="employee-sync-worker",
        description="Consume employee events and keep the hub's derived views fresh",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("consume", help="Consume events continuously (default)")

    pull = subparsers.add_parser("pull", help="Drain pending events and exit")
    group = pull.add_mutually_exclusive_group()
    group.add_argument("--limit", type=int, default=None, help="Maximum number of messages to process")
    group.add_argument("--once", action="store_true", help="Process a single message")

    return parser


def pull_limit(args: argparse.Namespace) -> Optional[int]:
    if getattr(args, "once", False):
        return 1
    return getattr(args, "limit", None)


async def run_worker(args: argparse.Namespace) -> None:
    command = args.command or "consume"

    setup_logging(
        service_name="worker.employee-events",
        log_file=os.getenv("WORKER_LOG_FILE"),
        enable_json=os.getenv("ENVIRONMENT") == "production",
        service_type="consumer",
    )

    worker = EmployeeEventWorker()
    log_worker_banner(
        logger=log,
        worker_name="Employee Event Worker",
        instance_id=worker.instance_id,
        service_type="consumer",
    )

    try:
        await worker.initialize()
        log_status_update(log, "Worker Ready", {
            "command": command,
            "exchange": worker.rabbitmq_config.exchange,
            "queue": worker.rabbitmq_config.queue,
            "binding": worker.rabbitmq_config.binding_key,
            "prefetch": worker.rabbitmq_config.prefetch_count,
        })

        if command == "pull":
            await worker.run_pull(limit=pull_limit(args))
        else:
            signal.signal(signal.SIGINT, worker.handle_signal)
            signal.signal(signal.SIGTERM, worker.handle_signal)
            await worker.run_consume()

    except KeyboardInterrupt:
        log.info("Worker interrupted by user")
    except Exception as e:
        log.error(f"Worker failed: {e}", exc_info=True)
        raise
    finally:
        try:
            await asyncio.wait_for(worker.stop(), timeout=SHUTDOWN_TIMEOUT_SECONDS)
            log.info("Graceful shutdown completed")
        except asyncio.TimeoutError:
            log.error("Graceful shutdown timed out")


def main(argv: Optional[list] = None):
    """Main entry point"""
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(run_worker(args))
    except KeyboardInterrupt:
        print("\nWorker interrupted")
    except Exception as e:
        print(f"Worker crashed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

# =============================================================================
# EOF
# =============================================================================
