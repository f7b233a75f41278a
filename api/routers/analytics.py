"""Analytics Router - aggregates for the dashboard and analytics pages."""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_store, serialize_contact
from contact_dashboard.analysis import build_analytics, contact_stats, recent_contacts
from contact_dashboard.store import ContactStore

router = APIRouter()


@router.get("/analytics")
def analytics(store: ContactStore = Depends(get_store)) -> dict:
    contacts = store.contacts
    body = build_analytics(contacts, now=datetime.now(timezone.utc))
    body["availability"] = store.availability.value
    return body


@router.get("/dashboard")
def dashboard(
    limit: int = Query(5, ge=1, le=50),
    store: ContactStore = Depends(get_store),
) -> dict:
    """KPI numbers plus the first few contacts for the landing page."""
    contacts = store.contacts
    return {
        "stats": contact_stats(contacts).to_dict(),
        "recentContacts": [serialize_contact(c) for c in recent_contacts(contacts, limit=limit)],
        "availability": store.availability.value,
        "error": store.error,
    }
