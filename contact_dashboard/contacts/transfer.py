"""Import/sync progress records and the CSV import template."""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


IMPORT_TEMPLATE_HEADER = [
    "firstName",
    "lastName",
    "email",
    "phone",
    "company",
    "jobTitle",
    "tags",
    "notes",
]

IMPORT_TEMPLATE_SAMPLE = [
    "John",
    "Doe",
    "john.doe@example.com",
    "+1234567890",
    "Acme Inc",
    "Software Engineer",
    "client,tech",
    "Sample contact",
]

IMPORT_TEMPLATE_FILENAME = "contacts_template.csv"


class TransferPhase(Enum):
    """Where an import or sync currently stands."""
    IDLE = "idle"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


ACTIVE_PHASES = frozenset({TransferPhase.UPLOADING, TransferPhase.PROCESSING, TransferPhase.SYNCING})


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, frozen=True)
class TransferStatus:
    """Snapshot of an import or sync run."""
    phase: TransferPhase = TransferPhase.IDLE
    message: str = ""
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    total_rows: Optional[int] = None
    detail: Optional[str] = None

    @property
    def in_progress(self) -> bool:
        return self.phase in ACTIVE_PHASES

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def advance(self, phase: TransferPhase, message: str) -> TransferStatus:
        """Move to an in-flight phase, keeping the original start time."""
        return TransferStatus(
            phase=phase,
            message=message,
            started_at=self.started_at if self.in_progress else _now(),
        )

    def succeed(self, message: str, *, total_rows: int, detail: Optional[str] = None) -> TransferStatus:
        return TransferStatus(
            phase=TransferPhase.SUCCESS,
            message=message,
            started_at=self.started_at,
            finished_at=_now(),
            total_rows=total_rows,
            detail=detail,
        )

    def fail(self, message: str, *, detail: Optional[str] = None) -> TransferStatus:
        return TransferStatus(
            phase=TransferPhase.ERROR,
            message=message,
            started_at=self.started_at,
            finished_at=_now(),
            detail=detail,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.phase.value,
            "message": self.message,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
            "durationSeconds": self.duration_seconds,
            "totalRows": self.total_rows,
            "detail": self.detail,
        }


def build_import_template() -> str:
    """Return the CSV template users fill in before importing."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(IMPORT_TEMPLATE_HEADER)
    writer.writerow(IMPORT_TEMPLATE_SAMPLE)
    return buffer.getvalue()
