"""User-facing notifications raised by contact operations."""
from .center import (
    Notification,
    NotificationCenter,
    NotificationKind,
    NotificationSink,
)

__all__ = [
    "Notification",
    "NotificationCenter",
    "NotificationKind",
    "NotificationSink",
]
