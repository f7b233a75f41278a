"""Form-level checks and tag handling for contact drafts and patches."""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping
from urllib import parse as urlparse

from .models import SERVER_FIELDS


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s+()-]+$")

REQUIRED_MESSAGE = "This field is required"
EMAIL_MESSAGE = "Enter a valid email address"
PHONE_MESSAGE = "Enter a valid phone number"

AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=random&color=fff"


class ContactValidationError(ValueError):
    """Raised when a submitted contact form fails validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        summary = ", ".join(f"{name}: {message}" for name, message in self.errors.items())
        super().__init__(f"Invalid contact: {summary}")


def validate_field(name: str, value: Any) -> str:
    """Return the error message for one form field, or an empty string."""
    text = "" if value is None else str(value)
    if name in ("firstName", "lastName"):
        return "" if text.strip() else REQUIRED_MESSAGE
    if name == "email":
        return "" if EMAIL_PATTERN.match(text) else EMAIL_MESSAGE
    if name == "phone":
        return "" if PHONE_PATTERN.match(text) else PHONE_MESSAGE
    return ""


def validate_contact_form(
    data: Mapping[str, Any], *, partial: bool = False
) -> Dict[str, str]:
    """Check the required fields of a camelCase contact payload.

    With ``partial=True`` only the fields present in ``data`` are checked,
    which is what an edit form submitting a patch needs.
    """
    errors: Dict[str, str] = {}
    for name in ("firstName", "lastName", "email", "phone"):
        if partial and name not in data:
            continue
        message = validate_field(name, data.get(name))
        if message:
            errors[name] = message
    return errors


def add_tag(tags: Iterable[str], tag: str) -> List[str]:
    """Return ``tags`` with ``tag`` appended, lowercased.

    Blank tags and tags already present (case-insensitive) leave the list unchanged.
    """
    current = list(tags)
    candidate = (tag or "").strip().lower()
    if not candidate:
        return current
    if any(existing.lower() == candidate for existing in current):
        return current
    current.append(candidate)
    return current


def remove_tag(tags: Iterable[str], tag: str) -> List[str]:
    return [existing for existing in tags if existing != tag]


def normalize_tags(tags: Iterable[str]) -> List[str]:
    result: List[str] = []
    for tag in tags or []:
        result = add_tag(result, tag)
    return result


def default_avatar_url(first_name: str, last_name: str) -> str:
    name = "+".join(urlparse.quote(part.strip()) for part in (first_name, last_name) if part)
    return AVATAR_URL.format(name=name)


def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
    payload = {key: value for key, value in data.items() if key not in SERVER_FIELDS}
    if "tags" in payload:
        payload["tags"] = normalize_tags(payload.get("tags") or [])
    address = payload.get("address")
    if isinstance(address, Mapping):
        trimmed = {key: value for key, value in address.items() if value not in (None, "")}
        payload["address"] = trimmed or None
    return payload


def build_draft(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a new-contact form and shape it into a create payload.

    Raises:
        ContactValidationError: if a required field is missing or malformed.
    """
    errors = validate_contact_form(data)
    if errors:
        raise ContactValidationError(errors)

    draft = _clean(data)
    draft["firstName"] = str(draft["firstName"]).strip()
    draft["lastName"] = str(draft["lastName"]).strip()
    draft.setdefault("tags", [])
    if not draft.get("avatar"):
        draft["avatar"] = default_avatar_url(draft["firstName"], draft["lastName"])
    return draft


def build_patch(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate the fields present in an edit form and shape a patch payload."""
    errors = validate_contact_form(data, partial=True)
    if errors:
        raise ContactValidationError(errors)
    return _clean(data)
