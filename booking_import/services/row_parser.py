from __future__ import annotations

import logging
from collections.abc import Iterable

from booking_import.excel.cells import CellError, clean_text, parse_cell
from booking_import.models.row_outcome import UNKNOWN_REFERENCE, Parsed, ParseFailure, RawRow
from booking_import.services.layouts import ImportLayout, RowRuleError

"""Row parser: RawRow -> typed record or ParseFailure.

Columns are read positionally in layout order. The first offending column
wins so each failed row carries exactly one (row, message) pair.
"""

__all__ = [
    "parse_row",
    "parse_rows",
]

logger = logging.getLogger(__name__)


def _reference_of(raw: RawRow, layout: ImportLayout) -> str:
    # 失敗行でも参照番号セルは読めるなら報告に載せる (成功行と同じサニタイズ)
    column = layout.column(layout.reference_key)
    text = clean_text(column, raw.cell(layout.index_of(layout.reference_key)))
    return text or UNKNOWN_REFERENCE


def parse_row(raw: RawRow, layout: ImportLayout, actor: str = "bulk_upload") -> Parsed | ParseFailure:
    values = {}
    for index, column in enumerate(layout.columns):
        try:
            values[column.key] = parse_cell(column, raw.cell(index))
        except CellError as e:
            return ParseFailure(
                row=raw.row_number,
                field=column.header,
                message=str(e),
                reference=_reference_of(raw, layout),
            )
    try:
        record = layout.build(values, actor)
    except RowRuleError as e:
        return ParseFailure(
            row=raw.row_number,
            field=None,
            message=str(e),
            reference=_reference_of(raw, layout),
        )
    return Parsed(row=raw.row_number, record=record)


def parse_rows(
    rows: Iterable[RawRow], layout: ImportLayout, actor: str = "bulk_upload"
) -> list[Parsed | ParseFailure]:
    """Parse every row independently, preserving row order."""
    outcomes: list[Parsed | ParseFailure] = []
    for raw in rows:
        outcome = parse_row(raw, layout, actor)
        if isinstance(outcome, ParseFailure):
            logger.debug("row=%d parse failed field=%s: %s", outcome.row, outcome.field, outcome.message)
        outcomes.append(outcome)
    return outcomes
