from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from booking_import.excel.cells import format_cell
from booking_import.excel.writer import write_workbook
from booking_import.models.column_spec import headers
from booking_import.services.layouts import ImportLayout

"""Record export in upload layout.

Writes parsed records back in the layout's column order with each cell
formatted the way the parser reads it, so an exported workbook can be
corrected and uploaded again.
"""

__all__ = [
    "export_records",
]


def export_records(records: Iterable[Any], layout: ImportLayout) -> bytes:
    rows = [
        [format_cell(column, getattr(record, column.key)) for column in layout.columns]
        for record in records
    ]
    return write_workbook(
        layout.export_sheet_name,
        headers(layout.columns),
        rows,
        widths=[c.width for c in layout.columns],
    )
