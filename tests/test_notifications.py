"""Tests for the NotificationCenter feed."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from contact_dashboard.notifications import (
    Notification,
    NotificationCenter,
    NotificationKind,
)
from contact_dashboard.notifications.center import WELCOME_TITLE


class TestNotificationCenter:

    def test_newest_first(self):
        center = NotificationCenter()
        center.add_notification("First", "one", NotificationKind.INFO)
        center.add_notification("Second", "two", NotificationKind.SUCCESS)

        assert [n.title for n in center.notifications] == ["Second", "First"]

    def test_kind_accepts_string(self):
        center = NotificationCenter()
        notification = center.add_notification("Error", "boom", "error")
        assert notification.kind is NotificationKind.ERROR

    def test_unknown_kind_rejected(self):
        center = NotificationCenter()
        with pytest.raises(ValueError):
            center.add_notification("Huh", "?", "loud")

    def test_welcome_seed(self):
        center = NotificationCenter(welcome=True)
        assert [n.title for n in center.notifications] == [WELCOME_TITLE]
        assert center.unread_count == 1

    def test_ids_are_unique(self):
        center = NotificationCenter()
        ids = {center.add_notification("t", "m").id for _ in range(20)}
        assert len(ids) == 20

    def test_mark_as_read(self):
        center = NotificationCenter()
        first = center.add_notification("a", "a")
        center.add_notification("b", "b")

        assert center.mark_as_read(first.id) is True
        assert center.unread_count == 1
        assert center.mark_as_read("missing") is False

    def test_mark_all_as_read(self):
        center = NotificationCenter()
        center.add_notification("a", "a")
        center.add_notification("b", "b")
        center.mark_all_as_read()
        assert center.unread_count == 0
        assert len(center.notifications) == 2

    def test_remove_and_clear(self):
        center = NotificationCenter()
        first = center.add_notification("a", "a")
        center.add_notification("b", "b")

        assert center.remove_notification(first.id) is True
        assert center.remove_notification(first.id) is False
        assert len(center.notifications) == 1

        center.clear_all()
        assert center.notifications == []

    def test_drain_returns_oldest_first_and_empties(self):
        center = NotificationCenter()
        center.add_notification("a", "a")
        center.add_notification("b", "b")

        assert [n.title for n in center.drain()] == ["a", "b"]
        assert center.notifications == []

    def test_expired_notifications_are_pruned(self):
        center = NotificationCenter(ttl_seconds=5)
        center.add_notification("fresh", "still here")
        center._items.append(
            Notification(
                id="old",
                title="stale",
                message="gone",
                kind=NotificationKind.INFO,
                timestamp=datetime.now(timezone.utc) - timedelta(seconds=60),
            )
        )

        assert [n.title for n in center.notifications] == ["fresh"]

    def test_to_dict_uses_type_key(self):
        center = NotificationCenter()
        data = center.add_notification("Success", "Contact added successfully", "success").to_dict()
        assert data["type"] == "success"
        assert data["read"] is False
        assert set(data) == {"id", "title", "message", "type", "timestamp", "read"}
