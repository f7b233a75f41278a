"""Tests for import/sync status records and the CSV template."""
from __future__ import annotations

import csv
import io

from contact_dashboard.contacts import TransferPhase, TransferStatus, build_import_template


class TestTransferStatus:

    def test_idle_by_default(self):
        status = TransferStatus()
        assert status.phase is TransferPhase.IDLE
        assert status.in_progress is False
        assert status.duration_seconds is None

    def test_advance_keeps_start_time(self):
        uploading = TransferStatus().advance(TransferPhase.UPLOADING, "Uploading file...")
        processing = uploading.advance(TransferPhase.PROCESSING, "Processing contacts...")
        assert processing.in_progress is True
        assert processing.started_at == uploading.started_at

    def test_succeed_records_rows_and_duration(self):
        status = TransferStatus().advance(TransferPhase.SYNCING, "Synchronizing...")
        done = status.succeed("Your contacts are up to date", total_rows=12, detail="ok")
        assert done.phase is TransferPhase.SUCCESS
        assert done.total_rows == 12
        assert done.duration_seconds >= 0
        assert done.to_dict()["status"] == "success"

    def test_new_run_restarts_clock(self):
        first = TransferStatus().advance(TransferPhase.SYNCING, "Synchronizing...").fail("Sync failed")
        second = first.advance(TransferPhase.SYNCING, "Synchronizing...")
        assert second.started_at >= first.finished_at
        assert second.detail is None


def test_import_template_quotes_tag_list():
    rows = list(csv.reader(io.StringIO(build_import_template())))
    assert rows[0] == [
        "firstName", "lastName", "email", "phone",
        "company", "jobTitle", "tags", "notes",
    ]
    assert rows[1][6] == "client,tech"
    assert '"client,tech"' in build_import_template()
