"""Contact record as served by the remote contacts API."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


ADDRESS_FIELDS = ("street", "city", "state", "zip", "country")

# Attribute name -> wire (camelCase) name for the editable fields.
EDITABLE_FIELDS: Dict[str, str] = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "company": "company",
    "job_title": "jobTitle",
    "notes": "notes",
    "avatar": "avatar",
    "tags": "tags",
    "address": "address",
}

SERVER_FIELDS = ("id", "createdAt", "updatedAt")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


@dataclass(slots=True)
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in ADDRESS_FIELDS
            if getattr(self, name) is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[Address]:
        if not data:
            return None
        return cls(**{name: data.get(name) for name in ADDRESS_FIELDS})

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in ADDRESS_FIELDS)


@dataclass(slots=True)
class Contact:
    """A contact record. ``id`` and the timestamps are assigned by the server."""

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    company: Optional[str] = None
    job_title: Optional[str] = None
    notes: Optional[str] = None
    address: Optional[Address] = None
    tags: List[str] = field(default_factory=list)
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire format."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "jobTitle": self.job_title,
            "notes": self.notes,
            "address": self.address.to_dict() if self.address else None,
            "tags": list(self.tags),
            "avatar": self.avatar,
            "createdAt": _format_timestamp(self.created_at),
            "updatedAt": _format_timestamp(self.updated_at),
        }

    def to_draft(self) -> Dict[str, Any]:
        """Return the record without the server-assigned fields."""
        payload = self.to_dict()
        for name in SERVER_FIELDS:
            payload.pop(name, None)
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Contact:
        return cls(
            id=str(data.get("id", "")),
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            company=data.get("company"),
            job_title=data.get("jobTitle"),
            notes=data.get("notes"),
            address=Address.from_dict(data.get("address")),
            tags=list(data.get("tags") or []),
            avatar=data.get("avatar"),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )

    def format_line(self) -> str:
        """One-line summary for terminal listings."""
        parts = [f"{self.id:<10}", f"{self.full_name:<28}", f"{self.email:<32}", self.phone]
        if self.company:
            parts.append(f"| {self.company}")
        if self.tags:
            parts.append(f"[{', '.join(self.tags)}]")
        return " ".join(parts)
