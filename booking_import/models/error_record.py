from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per failed row of an import run. row=-1 marks file-level errors
where no row applies (unreadable workbook, header mismatch).
"""

__all__ = [
    "ErrorRecord",
    "PARSE_ERROR",
    "COMMIT_ERROR",
    "FILE_ERROR",
]

PARSE_ERROR = "PARSE_ERROR"
COMMIT_ERROR = "COMMIT_ERROR"
FILE_ERROR = "FILE_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded file name
        sheet: Sheet the rows were read from
        row: Spreadsheet row number (header = 1). -1 for file-level errors
        error_type: PARSE_ERROR | COMMIT_ERROR | FILE_ERROR
        reference: Booking reference / registration, or placeholder
        message: Human readable reason
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int
    error_type: str  # UPPER_SNAKE
    reference: str
    message: str

    @staticmethod
    def create(
        file: str, sheet: str, row: int, error_type: str, reference: str, message: str
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            reference=reference,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
