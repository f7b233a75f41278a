"""Notifications Router - the dashboard's notification feed."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_notifications
from contact_dashboard.notifications import NotificationCenter

router = APIRouter()


@router.get("")
def list_notifications(center: NotificationCenter = Depends(get_notifications)) -> dict:
    items = center.notifications
    return {
        "notifications": [item.to_dict() for item in items],
        "unread": sum(1 for item in items if not item.read),
    }


@router.post("/read-all")
def mark_all_read(center: NotificationCenter = Depends(get_notifications)) -> dict:
    center.mark_all_as_read()
    return {"unread": 0}


@router.post("/{notification_id}/read")
def mark_read(
    notification_id: str,
    center: NotificationCenter = Depends(get_notifications),
) -> dict:
    if not center.mark_as_read(notification_id):
        raise HTTPException(status_code=404, detail=f"Notification {notification_id} not found")
    return {"id": notification_id, "read": True}


@router.delete("/{notification_id}")
def remove_notification(
    notification_id: str,
    center: NotificationCenter = Depends(get_notifications),
) -> dict:
    if not center.remove_notification(notification_id):
        raise HTTPException(status_code=404, detail=f"Notification {notification_id} not found")
    return {"removed": notification_id}


@router.delete("")
def clear_notifications(center: NotificationCenter = Depends(get_notifications)) -> dict:
    center.clear_all()
    return {"cleared": True}
