"""Tests for client-side contact filtering."""
from __future__ import annotations

from contact_dashboard.contacts.search import filter_contacts


def _ids(contacts):
    return [c.id for c in contacts]


class TestFilterContacts:

    def test_empty_search_and_filters_returns_everything_in_order(self, sample_contacts):
        assert _ids(filter_contacts(sample_contacts, "", {})) == ["c1", "c2", "c3", "c4"]

    def test_returns_new_list(self, sample_contacts):
        result = filter_contacts(sample_contacts, "", {})
        assert result is not sample_contacts
        result.clear()
        assert len(sample_contacts) == 4

    def test_search_is_case_insensitive(self, sample_contacts):
        result = filter_contacts(sample_contacts, "JOHN", {})
        assert "c1" in _ids(result)

    def test_search_matches_last_name(self, sample_contacts):
        # "john" is inside "Johnson"
        assert _ids(filter_contacts(sample_contacts, "john", {})) == ["c1", "c3"]

    def test_search_matches_email_and_phone(self, sample_contacts):
        assert _ids(filter_contacts(sample_contacts, "globex", {})) == ["c2"]
        assert _ids(filter_contacts(sample_contacts, "(555)", {})) == ["c3"]

    def test_search_ignores_company(self, sample_contacts):
        assert filter_contacts(sample_contacts, "Acme", {}) == []

    def test_tag_filter(self, sample_contacts):
        assert _ids(filter_contacts(sample_contacts, "", {"tag": "client"})) == ["c1", "c3"]

    def test_tag_filter_is_exact(self, sample_contacts):
        assert filter_contacts(sample_contacts, "", {"tag": "Client"}) == []
        assert filter_contacts(sample_contacts, "", {"tag": "cli"}) == []

    def test_search_and_tag_are_combined(self, sample_contacts):
        # Jane matches the search but not the tag; Bob has the tag but not the search.
        assert _ids(filter_contacts(sample_contacts, "j", {"tag": "client"})) == ["c1", "c3"]
        assert filter_contacts(sample_contacts, "jane", {"tag": "client"}) == []
        assert _ids(filter_contacts(sample_contacts, "doe", {"tag": "client"})) == ["c1"]

    def test_empty_filter_values_and_unknown_keys_are_ignored(self, sample_contacts):
        assert len(filter_contacts(sample_contacts, "", {"tag": ""})) == 4
        assert len(filter_contacts(sample_contacts, "", {"company": "Globex"})) == 4

    def test_none_filters(self, sample_contacts):
        assert len(filter_contacts(sample_contacts, "", None)) == 4
