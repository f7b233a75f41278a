"""API Routers Package.

Routers:
- contacts.py: cached list, filter, CRUD, import/export, sync
- notifications.py: notification feed
- analytics.py: /analytics and /dashboard aggregates

Usage in main.py:
    from api.routers import contacts_router, notifications_router, analytics_router

    app.include_router(contacts_router, prefix="/contacts", tags=["contacts"])
    app.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
    app.include_router(analytics_router, tags=["analytics"])
"""

from .analytics import router as analytics_router
from .contacts import router as contacts_router
from .notifications import router as notifications_router

__all__ = [
    "analytics_router",
    "contacts_router",
    "notifications_router",
]
