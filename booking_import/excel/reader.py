from __future__ import annotations

import io
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import IO, Any

import pandas as pd

from booking_import.excel.cells import cell_text, is_empty
from booking_import.models.row_outcome import RawRow

"""Excel reader for bulk uploads.

Row 1 is the header row, data starts at row 2. Only the first sheet is
read. Cells are read positionally (header=None, dtype=object) so native
spreadsheet types survive: dates arrive as datetime, numbers as int/float.
pandas' NA string conversion is off, so text such as "N/A" or "None" stays
text and only blank cells count as empty.
"""

__all__ = [
    "WorkbookReadError",
    "HeaderMismatchError",
    "read_first_sheet",
    "header_cells",
    "check_header",
    "iter_raw_rows",
]

HEADER_ROW_NUMBER = 1


class WorkbookReadError(Exception):
    """Raised when the upload cannot be decoded as a spreadsheet at all."""


class HeaderMismatchError(Exception):
    """Raised when the header row does not match the expected column order."""


def read_first_sheet(source: Path | bytes | IO[bytes]) -> pd.DataFrame:
    """Read the first sheet of a workbook as a raw positional grid.

    Parameters
    ----------
    source: workbook path, raw bytes or binary file object (.xlsx / .xls)
    """
    if isinstance(source, bytes | bytearray):
        source = io.BytesIO(source)
    try:
        with pd.ExcelFile(source) as xls:
            if not xls.sheet_names:
                return pd.DataFrame()
            # ヘッダなしで生読み (1行目をヘッダとして後で検証)
            # "N/A" / "NA" / "None" 等は NaN にせず文字列のまま残す (空判定は cells.is_empty)
            return xls.parse(
                xls.sheet_names[0],
                header=None,
                dtype=object,
                keep_default_na=False,
                na_values=[],
            )
    except Exception as e:
        raise WorkbookReadError(f"could not read spreadsheet: {e}") from e


def header_cells(df: pd.DataFrame) -> list[str]:
    if df.shape[0] == 0:
        return []
    return [cell_text(v) for v in df.iloc[0].tolist()]


def check_header(df: pd.DataFrame, expected: Sequence[str]) -> None:
    """Validate that row 1 carries ``expected`` labels in order.

    Comparison is trimmed and case-insensitive. Extra trailing columns are
    allowed; an empty sheet passes (treated as empty input).
    """
    if df.shape[0] == 0:
        return
    found = header_cells(df)
    found += [""] * (len(expected) - len(found))
    for index, label in enumerate(expected):
        if found[index].strip().lower() != label.strip().lower():
            raise HeaderMismatchError(
                f"column {index + 1}: expected header '{label}', found '{found[index]}'"
            )


def iter_raw_rows(df: pd.DataFrame) -> Iterator[RawRow]:
    """Yield data rows (row 2 onwards) tagged with their spreadsheet row number.

    Fully blank rows are skipped without renumbering the rows that follow.
    """
    for position in range(1, df.shape[0]):
        values: list[Any] = df.iloc[position].tolist()
        if all(is_empty(v) for v in values):
            continue
        cells = tuple(None if is_empty(v) else v for v in values)
        yield RawRow(row_number=position + HEADER_ROW_NUMBER, cells=cells)
