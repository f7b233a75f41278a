"""Contacts Router - cached contact list, CRUD, import, sync and export.

Every endpoint goes through the application's ContactStore so the dashboard
sees the same cache and notifications as the rest of the process.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse, Response

from api.dependencies import (
    get_store,
    serialize_contact,
    serialize_store_state,
    upstream_error,
)
from api.models import ContactFormRequest, ContactPatchRequest
from contact_dashboard.contact_client import ContactAPIError
from contact_dashboard.contacts import (
    ContactValidationError,
    build_draft,
    build_import_template,
    build_patch,
)
from contact_dashboard.contacts.transfer import IMPORT_TEMPLATE_FILENAME
from contact_dashboard.store import EXPORT_FILENAME, ContactStore, ImportFileError

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Cache Views
# =============================================================================

@router.get("")
def list_contacts(
    search: str = Query("", description="Case-insensitive name/email/phone filter"),
    tag: Optional[str] = Query(None, description="Only contacts carrying this tag"),
    store: ContactStore = Depends(get_store),
) -> dict:
    """Filter the cached contacts without calling the contacts service."""
    filters = {"tag": tag} if tag else {}
    return serialize_store_state(store, store.filter_contacts(search, filters))


@router.post("/refresh")
def refresh_contacts(store: ContactStore = Depends(get_store)) -> dict:
    """Reload the full list from the contacts service."""
    store.fetch_all()
    return serialize_store_state(store)


@router.get("/search")
def search_contacts(
    query: str = Query(..., min_length=1),
    store: ContactStore = Depends(get_store),
) -> dict:
    """Run a server-side search; the result replaces the cache."""
    store.search_contacts(query)
    return serialize_store_state(store)


@router.get("/status")
def transfer_status(store: ContactStore = Depends(get_store)) -> dict:
    return {
        "import": store.import_status.to_dict(),
        "sync": store.sync_status.to_dict(),
        "syncing": store.syncing,
        "totalContacts": len(store.contacts),
    }


# =============================================================================
# Import / Export / Sync
# =============================================================================

@router.get("/export")
def export_contacts(store: ContactStore = Depends(get_store)):
    path = store.export_contacts()
    if path is None:
        raise HTTPException(status_code=502, detail="Failed to export contacts")
    return FileResponse(path, media_type="text/csv", filename=EXPORT_FILENAME)


@router.get("/import/template")
def import_template() -> Response:
    return Response(
        content=build_import_template(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{IMPORT_TEMPLATE_FILENAME}"'},
    )


@router.post("/import")
def import_contacts(
    file: UploadFile = File(...),
    store: ContactStore = Depends(get_store),
) -> dict:
    try:
        result = store.import_contacts(file.file, filename=file.filename or "")
    except (ImportFileError, OSError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ContactAPIError as exc:
        raise upstream_error(exc)
    return {
        "message": (result or {}).get("message"),
        "status": store.import_status.to_dict(),
        "totalContacts": len(store.contacts),
    }


@router.post("/sync")
def sync_contacts(store: ContactStore = Depends(get_store)) -> dict:
    try:
        result = store.sync_contacts()
    except ContactAPIError as exc:
        raise upstream_error(exc)
    return {
        "message": (result or {}).get("message"),
        "status": store.sync_status.to_dict(),
        "totalContacts": len(store.contacts),
    }


# =============================================================================
# Single Contact CRUD
# =============================================================================

@router.get("/{contact_id}")
def get_contact(contact_id: str, store: ContactStore = Depends(get_store)) -> dict:
    contact = store.get_contact(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail=f"Contact {contact_id} not found")
    return serialize_contact(contact)


@router.post("", status_code=201)
def create_contact(
    request: ContactFormRequest,
    store: ContactStore = Depends(get_store),
) -> dict:
    try:
        draft = build_draft(request.to_payload())
    except ContactValidationError as exc:
        raise HTTPException(status_code=422, detail={"errors": exc.errors})
    try:
        created = store.add_contact(draft)
    except ContactAPIError as exc:
        raise upstream_error(exc)
    return serialize_contact(created)


@router.put("/{contact_id}")
def update_contact(
    contact_id: str,
    request: ContactPatchRequest,
    store: ContactStore = Depends(get_store),
) -> dict:
    try:
        patch = build_patch(request.to_payload())
    except ContactValidationError as exc:
        raise HTTPException(status_code=422, detail={"errors": exc.errors})
    if not patch:
        raise HTTPException(status_code=400, detail="No updates provided")
    try:
        updated = store.update_contact(contact_id, patch)
    except ContactAPIError as exc:
        raise upstream_error(exc)
    return serialize_contact(updated)


@router.delete("/{contact_id}")
def delete_contact(contact_id: str, store: ContactStore = Depends(get_store)) -> dict:
    try:
        store.delete_contact(contact_id)
    except ContactAPIError as exc:
        raise upstream_error(exc)
    return {"deleted": contact_id, "total": len(store.contacts)}
