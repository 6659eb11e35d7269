# =============================================================================
# File: employee_sync/wse/core/pubsub_bus.py
# Description: Redis Pub/Sub fan-out for change notifications
# =============================================================================

"""
PubSubBus - Redis Pub/Sub for subscriber notifications

    EmployeeEventProcessor → ChangeNotifier → PubSubBus.publish()
                                                   ↓
                                       Redis Pub/Sub (broadcast)
                                                   ↓
                               every subscriber of checklist.{country}
                               or employees.{country}

Ephemeral: nothing is persisted, subscribers that are not listening miss
the notification. Publishing twice is harmless.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

log = logging.getLogger("employee_sync.wse.pubsub")


class NotificationJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles UUID, datetime, Decimal"""

    def default(self, obj):
        if isinstance(obj, UUID):
            return str(obj)
        elif isinstance(obj, datetime):
            return obj.isoformat()
        elif isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


class PubSubBus:
    """
    Publisher side of Redis Pub/Sub, sharing the process-wide Redis client.

    Errors propagate: a failed broadcast makes the consumer requeue the event.
    """

    def __init__(self, redis_client: Any):
        if not redis_client:
            raise ValueError("redis_client is required")

        self.redis_client = redis_client
        self._messages_published = 0

    async def publish(self, topic: str, event: Dict[str, Any]) -> int:
        """Broadcast ``event`` on ``topic``. Returns the number of receivers."""
        payload = json.dumps(event, cls=NotificationJSONEncoder)
        receivers = await self.redis_client.publish(topic, payload)
        self._messages_published += 1
        log.debug(f"Published to {topic} ({receivers} receivers)")
        return receivers

    def get_metrics(self) -> Dict[str, Any]:
        return {"messages_published": self._messages_published}
