"""
Notification center.
The single channel through which user-visible outcomes are published.
"""
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, List

from hot22_dashboard.core.logging_setup import get_logger

logger = get_logger(__name__)


class NotificationLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


LOG_METHODS = {
    NotificationLevel.WARNING: "warning",
    NotificationLevel.ERROR: "error",
}


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


Listener = Callable[[Notification], None]


class NotificationCenter:
    """Bounded, most-recent-first list of notifications with listeners."""

    def __init__(self, max_notifications: int = 20):
        self._notifications: Deque[Notification] = deque(maxlen=max_notifications)
        self._listeners: List[Listener] = []

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=NotificationLevel(level), message=message)
        self._notifications.appendleft(notification)
        log = getattr(logger, LOG_METHODS.get(notification.level, "info"))
        log("notification", level=notification.level.value, message=message)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        self._notifications.clear()
