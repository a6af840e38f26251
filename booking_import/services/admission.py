from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

"""File admission check, run before any parsing.

A rejected file stops the whole import with zero rows processed; it is not
a per-row error.
"""

__all__ = [
    "ALLOWED_EXTENSIONS",
    "MAX_UPLOAD_BYTES",
    "AdmissionError",
    "AdmissionResult",
    "check_upload",
    "ensure_admitted",
]

ALLOWED_EXTENSIONS = (".xlsx", ".xls")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


class AdmissionError(Exception):
    """Raised when an upload fails the admission check."""


@dataclass(frozen=True)
class AdmissionResult:
    valid: bool
    error: str | None = None


def check_upload(filename: str, size: int) -> AdmissionResult:
    """Validate extension and byte size of a candidate upload."""
    suffix = PurePath(filename).suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        return AdmissionResult(False, "Please upload an Excel file (.xlsx or .xls)")
    if size > MAX_UPLOAD_BYTES:
        return AdmissionResult(False, "File size must be less than 10MB")
    return AdmissionResult(True)


def ensure_admitted(filename: str, size: int) -> None:
    result = check_upload(filename, size)
    if not result.valid:
        raise AdmissionError(result.error)
