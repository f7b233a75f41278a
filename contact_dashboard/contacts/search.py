"""Client-side filtering over the cached contact list."""
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .models import Contact


SEARCHABLE_FIELDS = ("first_name", "last_name", "email", "phone")

# Filter keys understood by filter_contacts; anything else is ignored.
SUPPORTED_FILTERS = ("tag",)


def matches_search(contact: Contact, search_term: str) -> bool:
    """True when ``search_term`` is a case-insensitive substring of a searchable field."""
    if not search_term:
        return True
    needle = search_term.lower()
    return any(
        needle in (getattr(contact, name) or "").lower() for name in SEARCHABLE_FIELDS
    )


def matches_filters(contact: Contact, filters: Optional[Mapping[str, str]]) -> bool:
    for key, value in (filters or {}).items():
        if not value or key not in SUPPORTED_FILTERS:
            continue
        if key == "tag" and value not in contact.tags:
            return False
    return True


def filter_contacts(
    contacts: Iterable[Contact],
    search_term: str = "",
    filters: Optional[Mapping[str, str]] = None,
) -> List[Contact]:
    """Return the contacts passing both the search term and every active filter.

    Order is preserved and the input is never modified.
    """
    return [
        contact
        for contact in contacts
        if matches_search(contact, search_term) and matches_filters(contact, filters)
    ]
