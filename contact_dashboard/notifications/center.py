"""In-process notification feed shown by the dashboard."""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class NotificationKind(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationSink(Protocol):
    """Anything the contact store can report operation outcomes to."""

    def add_notification(self, title: str, message: str, kind: NotificationKind) -> Any:
        ...


@dataclass(slots=True, frozen=True)
class Notification:
    """A single user-facing message."""
    id: str
    title: str
    message: str
    kind: NotificationKind
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
            "read": self.read,
        }


WELCOME_TITLE = "Welcome to Smart Contact Manager"
WELCOME_MESSAGE = "Get started by adding your first contact"


class NotificationCenter:
    """Newest-first notification list with optional auto-dismiss.

    Args:
        ttl_seconds: Age after which a notification is dropped from the feed.
            ``None`` keeps notifications until removed.
        welcome: Seed the feed with the welcome message.
    """

    def __init__(self, *, ttl_seconds: Optional[float] = None, welcome: bool = False) -> None:
        self.ttl_seconds = ttl_seconds
        self._items: List[Notification] = []
        self._lock = threading.Lock()
        if welcome:
            self._items.append(
                Notification(
                    id=self._new_id(),
                    title=WELCOME_TITLE,
                    message=WELCOME_MESSAGE,
                    kind=NotificationKind.INFO,
                )
            )

    @staticmethod
    def _new_id() -> str:
        return f"notification-{uuid.uuid4().hex[:12]}"

    def add_notification(
        self,
        title: str,
        message: str,
        kind: NotificationKind | str = NotificationKind.INFO,
    ) -> Notification:
        kind = NotificationKind(kind)
        notification = Notification(
            id=self._new_id(),
            title=title,
            message=message,
            kind=kind,
        )
        level = logging.WARNING if kind is NotificationKind.ERROR else logging.INFO
        logger.log(level, f"[{kind.value}] {title}: {message}")
        with self._lock:
            self._items.insert(0, notification)
        return notification

    @property
    def notifications(self) -> List[Notification]:
        with self._lock:
            self._prune_expired()
            return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self.notifications if not item.read)

    def mark_as_read(self, notification_id: str) -> bool:
        with self._lock:
            for index, item in enumerate(self._items):
                if item.id == notification_id:
                    self._items[index] = replace(item, read=True)
                    return True
        return False

    def mark_all_as_read(self) -> None:
        with self._lock:
            self._items = [replace(item, read=True) for item in self._items]

    def remove_notification(self, notification_id: str) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if item.id != notification_id]
            return len(self._items) != before

    def clear_all(self) -> None:
        with self._lock:
            self._items = []

    def drain(self) -> List[Notification]:
        """Return and remove every notification, oldest first."""
        with self._lock:
            items = list(reversed(self._items))
            self._items = []
        return items

    def _prune_expired(self, now: Optional[datetime] = None) -> None:
        if self.ttl_seconds is None:
            return
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=self.ttl_seconds)
        self._items = [item for item in self._items if item.timestamp >= cutoff]
