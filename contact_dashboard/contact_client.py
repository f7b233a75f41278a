"""REST client for the remote contacts service."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Union

import requests

from .config import Settings
from .contacts.models import Contact

logger = logging.getLogger(__name__)


class ContactAPIError(RuntimeError):
    """Raised when the contacts service call fails."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContactServiceUnavailable(ContactAPIError):
    """The backend could not be reached."""


class ContactNotFoundError(ContactAPIError):
    """The backend answered 404."""


class ContactServerError(ContactAPIError):
    """The backend answered with a 5xx status."""


NOT_FOUND_MESSAGE = "The requested resource was not found"
SERVER_ERROR_MESSAGE = "Server error occurred. Please try again later"

UploadSource = Union[str, Path, BinaryIO]


class ContactServiceClient:
    """Small wrapper over the contacts REST API."""

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.api_base_url.rstrip("/")
        self.timeout_seconds = settings.timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if settings.api_token:
            self.session.headers["Authorization"] = f"Bearer {settings.api_token}"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_contacts(self) -> List[Contact]:
        payload = self._request("GET", "/contacts")
        return self._to_contacts(payload, "/contacts")

    def get_contact(self, contact_id: str) -> Contact:
        payload = self._request("GET", f"/contacts/{contact_id}")
        return Contact.from_dict(payload)

    def create_contact(self, draft: Dict[str, Any]) -> Contact:
        """Create a contact from a draft (no id or timestamps)."""
        payload = self._request("POST", "/contacts", body=draft)
        return Contact.from_dict(payload)

    def update_contact(self, contact_id: str, patch: Dict[str, Any]) -> Contact:
        """Send a partial update; the server merges and returns the canonical record."""
        if not patch:
            raise ValueError("No updates provided")
        payload = self._request("PUT", f"/contacts/{contact_id}", body=patch)
        return Contact.from_dict(payload)

    def delete_contact(self, contact_id: str) -> None:
        self._request("DELETE", f"/contacts/{contact_id}", expect="none")

    def search_contacts(self, query: str) -> List[Contact]:
        payload = self._request("GET", "/contacts/search", params={"query": query})
        return self._to_contacts(payload, "/contacts/search")

    def export_contacts(self) -> bytes:
        """Return the raw export artifact (CSV)."""
        return self._request(
            "GET", "/contacts/export", expect="bytes", accept="text/csv, */*"
        )

    def import_contacts(
        self, source: UploadSource, *, filename: Optional[str] = None
    ) -> Dict[str, Any]:
        """Upload a CSV file as multipart field ``file``."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            with path.open("rb") as handle:
                files = {"file": (filename or path.name, handle, "text/csv")}
                return self._request("POST", "/contacts/import", files=files)
        name = filename or Path(getattr(source, "name", "contacts.csv")).name
        files = {"file": (name, source, "text/csv")}
        return self._request("POST", "/contacts/import", files=files)

    def sync_contacts(self) -> Dict[str, Any]:
        return self._request("POST", "/contacts/sync")

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _to_contacts(self, payload: Any, path: str) -> List[Contact]:
        if not isinstance(payload, list):
            raise ContactAPIError(f"Contacts API GET {path} returned an unexpected payload")
        return [Contact.from_dict(item) for item in payload]

    def _unreachable_message(self) -> str:
        return (
            "Unable to connect to the backend server. Please ensure the server "
            f"is running on {self.base_url}"
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None,
        files: Optional[Dict[str, Tuple[str, Any, str]]] = None,
        expect: str = "json",
        accept: Optional[str] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": accept} if accept else None
        logger.debug(f"Making {method} request to {path}")

        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=body,
                files=files,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning(f"Contacts API {method} {path} unreachable: {exc}")
            raise ContactServiceUnavailable(self._unreachable_message()) from exc
        except requests.RequestException as exc:
            logger.warning(f"Contacts API {method} {path} failed: {exc}")
            raise ContactAPIError(f"Contacts API {method} {path} failed: {exc}") from exc

        logger.debug(f"Response received from {path}: {resp.status_code}")
        self._raise_for_status(resp, method, path)

        if expect == "none":
            return None
        if expect == "bytes":
            return resp.content
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise ContactAPIError(
                f"Contacts API {method} {path} returned invalid JSON",
                status_code=resp.status_code,
            ) from exc

    def _raise_for_status(self, resp: requests.Response, method: str, path: str) -> None:
        status = resp.status_code
        if status < 400:
            return
        detail = resp.text[:500] if resp.text else ""
        logger.warning(f"Contacts API {method} {path} failed with status {status}: {detail}")
        if status == 404:
            raise ContactNotFoundError(NOT_FOUND_MESSAGE, status_code=status)
        if status >= 500:
            raise ContactServerError(SERVER_ERROR_MESSAGE, status_code=status)
        raise ContactAPIError(
            f"Contacts API {method} {path} failed with status {status}: {detail}",
            status_code=status,
        )
