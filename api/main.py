"""FastAPI service for the Contact Dashboard."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_settings
from api.routers import analytics_router, contacts_router, notifications_router
from contact_dashboard import __version__
from contact_dashboard.config import Settings
from contact_dashboard.contact_client import ContactServiceClient
from contact_dashboard.notifications import NotificationCenter
from contact_dashboard.store import ContactStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ContactStore:
    """Wire client, notification center and store from settings."""
    center = NotificationCenter(ttl_seconds=settings.notification_ttl_seconds, welcome=True)
    client = ContactServiceClient(settings)
    return ContactStore(client, center, download_dir=settings.download_dir)


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_store = app.state.store is None
    if owns_store:
        store = build_store(app.state.settings)
        app.state.store = store
        app.state.notifications = store.notifier
        logger.info(f"Loading contacts from {app.state.settings.api_base_url}")
        await run_in_threadpool(store.start)
    try:
        yield
    finally:
        if owns_store:
            app.state.store.close()
            app.state.store = None
            app.state.notifications = None


def create_app(
    *,
    settings: Optional[Settings] = None,
    store: Optional[ContactStore] = None,
    notifications: Optional[NotificationCenter] = None,
) -> FastAPI:
    """Build the dashboard API.

    Args:
        settings: Configuration; loaded from the environment when omitted.
        store: Pre-built store. When given, the app neither starts nor closes it.
        notifications: Feed served at /notifications; defaults to the store's sink.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Contact Dashboard API",
        version=__version__,
        description="REST interface powering the contact management dashboard.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.notifications = notifications or (store.notifier if store else None)

    origins = [origin for origin in settings.allowed_origins if origin]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    def health_check(request: Request) -> dict:
        """Health check with contacts-service configuration and cache state."""
        current: Optional[ContactStore] = request.app.state.store
        return {
            "status": "ok",
            "time": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
            "contactsApi": settings.api_base_url,
            "availability": current.availability.value if current else "stopped",
        }

    app.include_router(contacts_router, prefix="/contacts", tags=["contacts"])
    app.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
    app.include_router(analytics_router, tags=["analytics"])
    return app


app = create_app()
