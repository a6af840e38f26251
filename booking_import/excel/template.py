from __future__ import annotations

from datetime import date

from booking_import.excel.writer import write_workbook
from booking_import.models.column_spec import headers
from booking_import.services.layouts import ImportLayout

"""Template generator.

Produces the header-only workbook users fill in. The header comes from the
same ColumnSpec tuple the row parser reads, so the downloadable template
cannot drift from the parser's column positions.
"""

__all__ = [
    "generate_template",
    "template_filename",
]


def generate_template(layout: ImportLayout) -> bytes:
    """Header-only .xlsx for ``layout`` (no example or data rows)."""
    return write_workbook(
        layout.template_sheet_name,
        headers(layout.columns),
        [],
        widths=[c.width for c in layout.columns],
    )


def template_filename(base: str, today: date | None = None) -> str:
    """``<base>_<YYYY-MM-DD>.xlsx``, deterministic for a given day."""
    today = today or date.today()
    return f"{base}_{today:%Y-%m-%d}.xlsx"
