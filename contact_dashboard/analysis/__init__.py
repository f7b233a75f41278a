"""Analytics helpers for the dashboard views."""
from .stats import (
    ContactStats,
    build_analytics,
    company_distribution,
    contact_stats,
    monthly_growth,
    recent_contacts,
    tag_distribution,
)

__all__ = [
    "ContactStats",
    "build_analytics",
    "company_distribution",
    "contact_stats",
    "monthly_growth",
    "recent_contacts",
    "tag_distribution",
]
