"""Aggregates behind the dashboard and analytics views."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Sequence, Tuple

from ..contacts.models import Contact


RECENT_WINDOW_DAYS = 30
NO_COMPANY = "No Company"


@dataclass(slots=True)
class ContactStats:
    """Headline numbers for the analytics KPI cards."""

    total_contacts: int
    companies_count: int
    tags_count: int
    recent_contacts: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalContacts": self.total_contacts,
            "companiesCount": self.companies_count,
            "tagsCount": self.tags_count,
            "recentContacts": self.recent_contacts,
        }


def contact_stats(
    contacts: Sequence[Contact], *, now: datetime | None = None
) -> ContactStats:
    """Count contacts, distinct companies and tags, and recently touched records.

    A contact is recent when ``updated_at`` falls within the last 30 days.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=RECENT_WINDOW_DAYS)
    companies = {c.company for c in contacts if c.company}
    tags = {tag for c in contacts for tag in c.tags}
    recent = sum(1 for c in contacts if c.updated_at is not None and c.updated_at >= cutoff)
    return ContactStats(
        total_contacts=len(contacts),
        companies_count=len(companies),
        tags_count=len(tags),
        recent_contacts=recent,
    )


def tag_distribution(contacts: Iterable[Contact]) -> Dict[str, int]:
    """Tag -> number of contacts carrying it, in first-seen order."""
    counts: Dict[str, int] = {}
    for contact in contacts:
        for tag in contact.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return counts


def company_distribution(
    contacts: Iterable[Contact], *, limit: int = 10
) -> List[Tuple[str, int]]:
    counts = Counter(contact.company or NO_COMPANY for contact in contacts)
    return counts.most_common(limit)


def monthly_growth(contacts: Sequence[Contact]) -> List[int]:
    """Twelve cumulative counts; entry ``i`` counts contacts created in month ``<= i``.

    Contacts without a creation timestamp are left out.
    """
    months = [c.created_at.month - 1 for c in contacts if c.created_at is not None]
    return [sum(1 for month in months if month <= index) for index in range(12)]


def recent_contacts(contacts: Sequence[Contact], *, limit: int = 5) -> List[Contact]:
    return list(contacts[:limit])


def build_analytics(contacts: Sequence[Contact], *, now: datetime | None = None) -> Dict[str, object]:
    """Everything the analytics view needs, in wire format."""
    return {
        "stats": contact_stats(contacts, now=now).to_dict(),
        "tags": tag_distribution(contacts),
        "companies": [
            {"company": name, "count": count}
            for name, count in company_distribution(contacts)
        ],
        "monthlyGrowth": monthly_growth(contacts),
    }
