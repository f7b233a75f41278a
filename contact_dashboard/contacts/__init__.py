"""Contact records, search filtering, form checks, and import templates."""
from .models import Address, Contact, parse_timestamp
from .search import filter_contacts
from .transfer import (
    TransferPhase,
    TransferStatus,
    build_import_template,
)
from .validation import (
    ContactValidationError,
    add_tag,
    build_draft,
    build_patch,
    normalize_tags,
    remove_tag,
    validate_contact_form,
)

__all__ = [
    # Records
    "Address",
    "Contact",
    "parse_timestamp",
    # Search
    "filter_contacts",
    # Import / sync
    "TransferPhase",
    "TransferStatus",
    "build_import_template",
    # Forms
    "ContactValidationError",
    "add_tag",
    "build_draft",
    "build_patch",
    "normalize_tags",
    "remove_tag",
    "validate_contact_form",
]
