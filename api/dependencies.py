"""Shared dependencies and helper functions for API routers.

Usage in routers:
    from api.dependencies import get_store, serialize_contact, upstream_error
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterable, Optional

from fastapi import HTTPException, Request

from contact_dashboard.config import Settings, load_settings
from contact_dashboard.contact_client import ContactAPIError, ContactNotFoundError
from contact_dashboard.contacts.models import Contact
from contact_dashboard.notifications import NotificationCenter
from contact_dashboard.store import ContactStore


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


# =============================================================================
# Request-scoped Dependencies
# =============================================================================

def get_store(request: Request) -> ContactStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Contact store is not running")
    return store


def get_notifications(request: Request) -> NotificationCenter:
    center = getattr(request.app.state, "notifications", None)
    if center is None:
        raise HTTPException(status_code=503, detail="Notifications are not available")
    return center


# =============================================================================
# Serialization Helpers
# =============================================================================

def serialize_contact(contact: Contact) -> Dict[str, Any]:
    return contact.to_dict()


def serialize_store_state(
    store: ContactStore,
    contacts: Optional[Iterable[Contact]] = None,
) -> Dict[str, Any]:
    """Serialize the cache (or a filtered view of it) plus the loading flags."""
    cached = store.contacts
    view = list(contacts) if contacts is not None else cached
    return {
        "contacts": [serialize_contact(c) for c in view],
        "count": len(view),
        "total": len(cached),
        "loading": store.loading,
        "syncing": store.syncing,
        "error": store.error,
        "availability": store.availability.value,
    }


def upstream_error(exc: ContactAPIError) -> HTTPException:
    """Translate a contacts-service failure into an HTTP error for the dashboard."""
    if isinstance(exc, ContactNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=502, detail=f"Contacts service error: {exc}")
