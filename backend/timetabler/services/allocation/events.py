from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Protocol

from anyio import from_thread

from timetabler.services.notification_hub import SCHEDULE_CHANNEL, NotificationHub, notification_hub

logger = logging.getLogger(__name__)

SCHEDULE_GENERATED = "schedule.generated"
ENTRY_CREATED = "schedule.entry_created"
ENTRY_REMOVED = "schedule.entry_removed"


class EventPublisher(Protocol):
    def publish(self, event_name: str, payload: dict[str, Any]) -> None: ...


class NullEventPublisher:
    def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        return None


class HubEventPublisher:
    """Fan schedule events out to websocket subscribers.

    Must be called from a worker thread (sync FastAPI routes run in one); the
    hub itself lives on the event loop.
    """

    def __init__(self, hub: NotificationHub = notification_hub, channel: str = SCHEDULE_CHANNEL) -> None:
        self.hub = hub
        self.channel = channel

    def publish(self, event_name: str, payload: dict[str, Any]) -> None:
        message = {
            "event": event_name,
            "published_at": datetime.now(timezone.utc).isoformat(),
            "data": payload,
        }
        try:
            from_thread.run(self.hub.publish, self.channel, message)
        except Exception:  # pragma: no cover - runtime environment dependent
            logger.debug("Unable to push %s event to channel %s", event_name, self.channel, exc_info=True)
