"""Session cache of contacts kept in step with the remote contacts service.

The store is the only writer of the cached list. Every operation reports its
outcome through a notification sink:

- fetch_all / search_contacts absorb failures into ``error`` and flag the
  cache as degraded
- add / update / delete / import / sync re-raise after notifying so callers
  can keep a form open
- export only notifies

Fetch-family calls are numbered when issued; a response older than the
newest one already applied is dropped.
"""
from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .contact_client import ContactAPIError, ContactServiceClient, UploadSource
from .contacts.models import SERVER_FIELDS, Contact
from .contacts.search import filter_contacts as _filter_contacts
from .contacts.transfer import TransferPhase, TransferStatus
from .notifications import NotificationKind, NotificationSink

logger = logging.getLogger(__name__)


class CacheAvailability(Enum):
    """Whether the cached list reflects a successful load."""
    UNLOADED = "unloaded"   # Nothing fetched yet
    READY = "ready"         # Last fetch succeeded
    DEGRADED = "degraded"   # Last fetch failed; cache may be stale or empty


class ImportFileError(ValueError):
    """Raised when the file picked for import is not a CSV."""


EXPORT_FILENAME = "contacts.csv"

SUCCESS = "Success"
ERROR = "Error"


class ContactStore:
    """In-memory contact list backed by :class:`ContactServiceClient`."""

    def __init__(
        self,
        client: ContactServiceClient,
        notifier: NotificationSink,
        *,
        download_dir: Optional[Path] = None,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.download_dir = Path(download_dir) if download_dir else Path.cwd()

        self._lock = threading.Lock()
        self._contacts: List[Contact] = []
        self._error: Optional[str] = None
        self._availability = CacheAvailability.UNLOADED
        self._loading = 0
        self._syncing = 0
        self._issued_seq = 0
        self._applied_seq = 0
        self._import_status = TransferStatus()
        self._sync_status = TransferStatus()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Load the initial contact list."""
        self.fetch_all()

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> ContactStore:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def contacts(self) -> List[Contact]:
        with self._lock:
            return list(self._contacts)

    @property
    def loading(self) -> bool:
        return self._loading > 0

    @property
    def syncing(self) -> bool:
        return self._syncing > 0

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def availability(self) -> CacheAvailability:
        return self._availability

    @property
    def import_status(self) -> TransferStatus:
        return self._import_status

    @property
    def sync_status(self) -> TransferStatus:
        return self._sync_status

    # ------------------------------------------------------------------
    # Fetch family
    # ------------------------------------------------------------------
    def fetch_all(self) -> bool:
        """Replace the cache with the full server list. Returns True if applied."""
        return self._replace_from(
            self.client.list_contacts,
            error="Failed to fetch contacts",
            notice="Failed to fetch contacts",
        )

    def search_contacts(self, query: str) -> bool:
        """Replace the cache with the server-side search result for ``query``."""
        return self._replace_from(
            lambda: self.client.search_contacts(query),
            error="Search failed",
            notice="Failed to search contacts",
        )

    def _replace_from(
        self,
        call: Callable[[], List[Contact]],
        *,
        error: str,
        notice: str,
    ) -> bool:
        with self._lock:
            self._issued_seq += 1
            seq = self._issued_seq
            self._loading += 1

        try:
            contacts = call()
        except ContactAPIError as exc:
            logger.warning(f"{error}: {exc}")
            with self._lock:
                if seq > self._applied_seq:
                    self._error = error
                    self._availability = CacheAvailability.DEGRADED
            self._notify(ERROR, notice, NotificationKind.ERROR)
            return False
        finally:
            with self._lock:
                self._loading -= 1

        with self._lock:
            if seq < self._applied_seq:
                logger.debug(
                    f"Discarding stale contact list (request {seq}, applied {self._applied_seq})"
                )
                return False
            self._applied_seq = seq
            self._contacts = list(contacts)
            self._error = None
            self._availability = CacheAvailability.READY
        logger.info(f"Loaded {len(contacts)} contacts")
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_contact(self, draft: Mapping[str, Any]) -> Contact:
        """Create a contact and append the server's record to the cache.

        ``id`` and the timestamps are dropped from ``draft``; the server assigns them.
        """
        payload = {key: value for key, value in draft.items() if key not in SERVER_FIELDS}
        try:
            created = self.client.create_contact(payload)
        except ContactAPIError:
            self._notify(ERROR, "Failed to add contact", NotificationKind.ERROR)
            raise

        with self._lock:
            if any(contact.id == created.id for contact in self._contacts):
                self._contacts = [
                    created if contact.id == created.id else contact
                    for contact in self._contacts
                ]
            else:
                self._contacts.append(created)
        self._notify(SUCCESS, "Contact added successfully", NotificationKind.SUCCESS)
        return created

    def update_contact(self, contact_id: str, patch: Mapping[str, Any]) -> Contact:
        """Send a partial update and swap in the server's merged record."""
        try:
            updated = self.client.update_contact(contact_id, dict(patch))
        except (ContactAPIError, ValueError):
            self._notify(ERROR, "Failed to update contact", NotificationKind.ERROR)
            raise

        with self._lock:
            self._contacts = [
                updated if contact.id == contact_id else contact
                for contact in self._contacts
            ]
        self._notify(SUCCESS, "Contact updated successfully", NotificationKind.SUCCESS)
        return updated

    def delete_contact(self, contact_id: str) -> None:
        try:
            self.client.delete_contact(contact_id)
        except ContactAPIError:
            self._notify(ERROR, "Failed to delete contact", NotificationKind.ERROR)
            raise

        with self._lock:
            self._contacts = [c for c in self._contacts if c.id != contact_id]
        self._notify(SUCCESS, "Contact deleted successfully", NotificationKind.SUCCESS)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_contact(self, contact_id: str) -> Optional[Contact]:
        with self._lock:
            return next((c for c in self._contacts if c.id == contact_id), None)

    def filter_contacts(
        self, search_term: str = "", filters: Optional[Mapping[str, str]] = None
    ) -> List[Contact]:
        return _filter_contacts(self.contacts, search_term, filters)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------
    def import_contacts(
        self, source: UploadSource, *, filename: Optional[str] = None
    ) -> Dict[str, Any]:
        """Upload a CSV file, then reload the full list.

        Raises:
            ImportFileError: if the file is not a CSV.
            ContactAPIError: if the upload fails.
            OSError: if the file cannot be read.
        """
        name = filename or Path(getattr(source, "name", str(source))).name
        if not name.lower().endswith(".csv"):
            self._notify("Invalid File Type", "Please select a CSV file", NotificationKind.ERROR)
            raise ImportFileError(f"{name} is not a CSV file")

        self._import_status = self._import_status.advance(
            TransferPhase.UPLOADING, "Uploading file..."
        )
        try:
            result = self.client.import_contacts(source, filename=name)
        except (ContactAPIError, OSError) as exc:
            self._import_status = self._import_status.fail(
                "Import failed. Please try again.", detail=str(exc)
            )
            self._notify(ERROR, "Failed to import contacts", NotificationKind.ERROR)
            raise

        self._import_status = self._import_status.advance(
            TransferPhase.PROCESSING, "Processing contacts..."
        )
        self.fetch_all()
        self._import_status = self._import_status.succeed(
            "Import completed successfully!",
            total_rows=len(self.contacts),
            detail=(result or {}).get("message"),
        )
        self._notify(SUCCESS, "Contacts imported successfully", NotificationKind.SUCCESS)
        return result

    def sync_contacts(self) -> Dict[str, Any]:
        """Run the server-side sync job, then reload the full list."""
        with self._lock:
            self._syncing += 1
        self._sync_status = self._sync_status.advance(
            TransferPhase.SYNCING, "Synchronizing..."
        )
        try:
            try:
                result = self.client.sync_contacts()
            except (ContactAPIError, OSError) as exc:
                self._sync_status = self._sync_status.fail(
                    "Sync failed", detail=str(exc)
                )
                self._notify(ERROR, "Failed to synchronize contacts", NotificationKind.ERROR)
                raise

            self.fetch_all()
            self._sync_status = self._sync_status.succeed(
                "Your contacts are up to date",
                total_rows=len(self.contacts),
                detail=(result or {}).get("message"),
            )
            self._notify(SUCCESS, "Contacts synchronized successfully", NotificationKind.SUCCESS)
            return result
        finally:
            with self._lock:
                self._syncing -= 1

    def export_contacts(self, destination: Optional[Path] = None) -> Optional[Path]:
        """Download the export file. Returns the written path, or None on failure."""
        target = Path(destination) if destination else self.download_dir / EXPORT_FILENAME
        try:
            data = self.client.export_contacts()
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except (ContactAPIError, OSError) as exc:
            logger.warning(f"Export failed: {exc}")
            self._notify(ERROR, "Failed to export contacts", NotificationKind.ERROR)
            return None

        self._notify(SUCCESS, "Contacts exported successfully", NotificationKind.SUCCESS)
        return target

    def _notify(self, title: str, message: str, kind: NotificationKind) -> None:
        self.notifier.add_notification(title, message, kind)
