from __future__ import annotations

from collections.abc import Sequence

from booking_import.excel.writer import write_workbook
from booking_import.models.row_outcome import UNKNOWN_REFERENCE
from booking_import.models.upload_result import UploadError

"""Error report exporter.

Writes one row per failed upload row: original row number, reference and
message, in the order of UploadResult.errors. Meant for a person fixing the
upload; it does not follow the import column layout.
"""

__all__ = [
    "ERROR_REPORT_SHEET",
    "export_error_report",
]

ERROR_REPORT_SHEET = "Upload Errors"


def export_error_report(errors: Sequence[UploadError], reference_header: str = "Booking Reference") -> bytes:
    rows = [[e.row, e.reference or UNKNOWN_REFERENCE, e.message] for e in errors]
    return write_workbook(
        ERROR_REPORT_SHEET,
        ["Row", reference_header, "Error"],
        rows,
        widths=[8, 20, 60],
    )
