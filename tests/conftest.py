"""Shared fixtures for the contact dashboard tests."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List
from unittest.mock import MagicMock

import pytest

from contact_dashboard.contacts.models import Contact
from contact_dashboard.notifications import NotificationCenter
from contact_dashboard.store import ContactStore


def make_contact(contact_id: str, first: str, last: str, **extra) -> Contact:
    defaults = {
        "email": f"{first.lower()}.{last.lower()}@example.com",
        "phone": "555-0100",
        "created_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
    }
    defaults.update(extra)
    return Contact(id=contact_id, first_name=first, last_name=last, **defaults)


@pytest.fixture
def sample_contacts() -> List[Contact]:
    return [
        make_contact("c1", "John", "Doe", company="Acme Inc", tags=["client", "tech"]),
        make_contact("c2", "Jane", "Smith", email="jane@globex.com", phone="555-0102",
                     company="Globex", tags=["vendor"]),
        make_contact("c3", "Bob", "Johnson", email="bob@initech.com", phone="(555) 0103",
                     tags=["client"]),
        make_contact("c4", "Ann", "Lee", email="ann@x.com", phone="555-0104"),
    ]


@pytest.fixture
def mock_client(sample_contacts):
    """A ContactServiceClient stand-in returning the sample contacts."""
    client = MagicMock()
    client.list_contacts.return_value = list(sample_contacts)
    client.search_contacts.return_value = []
    client.import_contacts.return_value = {"message": "Contacts imported"}
    client.sync_contacts.return_value = {"message": "Sync complete"}
    client.export_contacts.return_value = b"firstName,lastName\nJohn,Doe\n"
    return client


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def store(mock_client, notifications, tmp_path) -> ContactStore:
    return ContactStore(mock_client, notifications, download_dir=tmp_path)


@pytest.fixture
def loaded_store(store) -> ContactStore:
    store.fetch_all()
    return store
