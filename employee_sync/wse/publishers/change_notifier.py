# =============================================================================
# File: employee_sync/wse/publishers/change_notifier.py
# Description: Checklist and employee-data change notifications
# =============================================================================

import logging
from typing import Any, Dict, List

from employee_sync.infra.metrics.sync_metrics import notifications_published_total
from employee_sync.wse.core.pubsub_bus import PubSubBus

log = logging.getLogger("employee_sync.wse.change_notifier")


def checklist_topic(country: str) -> str:
    return f"checklist.{country}"


def employees_topic(country: str) -> str:
    return f"employees.{country}"


def checklist_message(country: str, missing_fields: List[str]) -> str:
    if not missing_fields:
        return f"Checklist updated for {country}. All data complete."
    return f"Checklist data invalidated for {country}. Some items need attention."


class ChangeNotifier:
    """Builds and fans out the two notifications emitted per processed event."""

    def __init__(self, bus: PubSubBus):
        self.bus = bus

    async def checklist_updated(self, country: str, event_type: str, missing_fields: List[str]) -> Dict[str, Any]:
        notification = {
            "country": country,
            "event_type": event_type,
            "message": checklist_message(country, missing_fields),
            "missing_fields": list(missing_fields),
        }
        await self.bus.publish(checklist_topic(country), notification)
        notifications_published_total.labels(channel="checklist").inc()
        return notification

    async def employee_data_updated(self, country: str, event_type: str, data: Any) -> Dict[str, Any]:
        notification = {
            "country": country,
            "event_type": event_type,
            "data": data,
        }
        await self.bus.publish(employees_topic(country), notification)
        notifications_published_total.labels(channel="employees").inc()
        return notification
