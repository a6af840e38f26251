from __future__ import annotations

import io
from collections.abc import Sequence
from typing import Any

import pandas as pd
from openpyxl.utils import get_column_letter

"""Shared workbook writer (single sheet, header row + data rows)."""

__all__ = [
    "XLSX_MEDIA_TYPE",
    "write_workbook",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def write_workbook(
    sheet_name: str,
    header: Sequence[str],
    rows: Sequence[Sequence[Any]],
    widths: Sequence[int] | None = None,
) -> bytes:
    """Serialize one sheet to .xlsx bytes.

    Row 1 is ``header``; ``rows`` follow from row 2 in the given order.
    """
    df = pd.DataFrame([list(r) for r in rows], columns=list(header))
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        if widths:
            ws = writer.sheets[sheet_name]
            for index, width in enumerate(widths, start=1):
                ws.column_dimensions[get_column_letter(index)].width = width
    return buffer.getvalue()
