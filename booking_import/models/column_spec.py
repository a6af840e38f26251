from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Column contract shared by the template generator and the row parser.

The parser addresses cells by position, so the order of a layout's
ColumnSpec tuple is the file format. Template, parser, record export and
error report all read the same tuple.
"""

__all__ = [
    "ColumnKind",
    "ColumnSpec",
    "headers",
]


class ColumnKind(Enum):
    """How a cell is parsed and formatted."""
    TEXT = "text"
    DATE = "date"
    TIME = "time"
    CURRENCY = "currency"
    INTEGER = "integer"
    ENUM = "enum"
    RETURNED = "returned"  # date or free-text note


@dataclass(frozen=True)
class ColumnSpec:
    """One spreadsheet column.

    Attributes:
        header: Label written to (and expected in) the header row
        key: Field name on the parsed record
        kind: Parse/format rule
        required: Missing or unparsable value fails the row
        width: Column width used when writing workbooks
        choices: Allowed values for ENUM columns (lower-case)
        pattern: Optional full-match regex for TEXT columns
        upper: Upper-case TEXT values after trimming
    """
    header: str
    key: str
    kind: ColumnKind = ColumnKind.TEXT
    required: bool = False
    width: int = 15
    choices: tuple[str, ...] = ()
    pattern: str | None = None
    upper: bool = False


def headers(columns: tuple[ColumnSpec, ...]) -> list[str]:
    return [c.header for c in columns]
