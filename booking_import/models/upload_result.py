from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

"""Upload result models for the bulk import pipeline.

UploadResult is the caller-facing summary of one import run: counts plus an
ascending-by-row error list that can be rendered or exported.
"""

__all__ = [
    "UploadError",
    "UploadResult",
    "UploadStatus",
]


class UploadStatus(Enum):
    """Overall verdict of an import run.

    - EMPTY: no data rows, nothing to import (not an error)
    - SUCCESS: every row committed
    - PARTIAL: some rows committed, some failed
    - FAILED: every row failed (still a completed run, not an exception)
    """
    EMPTY = "empty"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadError:
    row: int  # spreadsheet row number (header = 1)
    reference: str  # booking reference / registration, or placeholder
    message: str
    field: str | None = None
    kind: str = "parse"  # parse | commit


@dataclass(frozen=True)
class UploadResult:
    """Aggregated outcome of one import run.

    Invariant: success_count + failed_count == rows processed.
    """
    success_count: int
    failed_count: int
    errors: list[UploadError] = field(default_factory=list)
    record_ids: list[str] = field(default_factory=list)
    file_name: str = ""
    layout: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def total_rows(self) -> int:
        return self.success_count + self.failed_count

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def status(self) -> UploadStatus:
        if self.total_rows == 0:
            return UploadStatus.EMPTY
        if self.failed_count == 0:
            return UploadStatus.SUCCESS
        if self.success_count == 0:
            return UploadStatus.FAILED
        return UploadStatus.PARTIAL

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing shape: {success, failed, errors: [{row, booking, error}]}."""
        return {
            "success": self.success_count,
            "failed": self.failed_count,
            "errors": [
                {"row": e.row, "booking": e.reference, "error": e.message}
                for e in self.errors
            ],
        }
