from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Per-row models for the bulk import pipeline.

RawRow is one physical spreadsheet row as read from the first sheet.
RowOutcome is what happens to it: parsed and committed (Success), rejected
by the parser (ParseFailure) or rejected by the store (CommitFailure).
Outcomes live only for one import run.
"""

__all__ = [
    "RawRow",
    "Success",
    "Parsed",
    "ParseFailure",
    "CommitFailure",
    "RowOutcome",
    "UNKNOWN_REFERENCE",
]

# 参照番号を読めなかった行のプレースホルダ
UNKNOWN_REFERENCE = "Unknown"


@dataclass(frozen=True)
class RawRow:
    """Untyped cells of one data row.

    row_number is the 1-based row as shown in a spreadsheet editor: the
    header occupies row 1, so the first data row is 2. Blank rows are
    skipped upstream but never renumber the rows after them.
    """
    row_number: int
    cells: tuple[Any, ...]

    def cell(self, index: int) -> Any:
        # 短い行: 末尾の空セルは None 扱い
        if index < len(self.cells):
            return self.cells[index]
        return None


@dataclass(frozen=True)
class Parsed:
    """Parser output for a row that is ready to commit."""
    row: int
    record: Any  # ParsedBooking | ParsedVehicle

    @property
    def reference(self) -> str:
        return self.record.reference


@dataclass(frozen=True)
class Success:
    row: int
    record: Any
    record_id: str

    @property
    def reference(self) -> str:
        return self.record.reference


@dataclass(frozen=True)
class ParseFailure:
    row: int
    field: str | None  # column header, None for row-level rules
    message: str
    reference: str = UNKNOWN_REFERENCE


@dataclass(frozen=True)
class CommitFailure:
    row: int
    reference: str
    message: str


RowOutcome = Success | ParseFailure | CommitFailure
