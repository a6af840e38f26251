from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd

from booking_import.models.booking import ReturnedDate, ReturnedNote
from booking_import.models.column_spec import ColumnKind, ColumnSpec

"""Cell level parse and format rules, one per ColumnKind.

Parsers take the raw cell (str, int, float, datetime, time or empty) and
either return the typed value or raise CellError with a message that
already names the column. Formatters do the reverse for writing workbooks.
"""

__all__ = [
    "CellError",
    "is_empty",
    "parse_cell",
    "format_cell",
    "cell_text",
    "clean_text",
]

DATE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
CURRENCY_RE = re.compile(r"^£?\s*(\d{1,3}(,\d{3})+|\d+)(\.\d+)?$")
INTEGER_RE = re.compile(r"^\d+$")
DATE_FMT = "%d/%m/%Y"


class CellError(ValueError):
    """Raised when a cell cannot be converted for its column."""


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: Any) -> str:
    """Render any cell as trimmed text (integral floats without '.0')."""
    if is_empty(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.strftime(DATE_FMT)
    return str(value).strip()


def clean_text(col: ColumnSpec, value: Any) -> str:
    """Trimmed, sanitised (and upper-cased where configured) text, no format check."""
    # 入力サニタイズ: 前後空白除去 + 山括弧除去
    text = cell_text(value).replace("<", "").replace(">", "").strip()
    if col.upper:
        text = text.upper()
    return text


def _parse_text(col: ColumnSpec, value: Any) -> str:
    text = clean_text(col, value)
    if text and col.pattern and not re.fullmatch(col.pattern, text, flags=re.IGNORECASE):
        raise CellError(f"{col.header}: invalid format '{text}'")
    return text


def _parse_date(col: ColumnSpec, value: Any) -> date:
    # datetime は date のサブクラスなので先に判定
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        m = DATE_RE.match(value.strip())
        if m:
            day, month, year = (int(g) for g in m.groups())
            try:
                return date(year, month, day)
            except ValueError as e:
                raise CellError(f"{col.header}: '{value.strip()}' is not a valid date") from e
    raise CellError(f"{col.header}: expected DD/MM/YYYY, got '{cell_text(value)}'")


def _parse_time(col: ColumnSpec, value: Any) -> str:
    if isinstance(value, datetime | time):
        return f"{value.hour:02d}:{value.minute:02d}"
    if isinstance(value, int | float) and not isinstance(value, bool) and 0 <= value < 1:
        # Excel の時刻シリアル (1日の割合)
        minutes = round(value * 24 * 60)
        return f"{(minutes // 60) % 24:02d}:{minutes % 60:02d}"
    if isinstance(value, str):
        m = TIME_RE.match(value.strip())
        if m:
            hours, minutes = int(m.group(1)), int(m.group(2))
            if hours < 24 and minutes < 60:
                return f"{hours:02d}:{minutes:02d}"
    raise CellError(f"{col.header}: expected HH:MM, got '{cell_text(value)}'")


def _parse_currency(col: ColumnSpec, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise CellError(f"{col.header}: expected an amount, got '{value}'")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if math.isinf(value):
            raise CellError(f"{col.header}: expected an amount, got '{value}'")
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if text.startswith("-"):
            raise CellError(f"{col.header}: amount must not be negative")
        if not CURRENCY_RE.match(text):
            raise CellError(f"{col.header}: expected an amount, got '{text}'")
        amount = Decimal(text.lstrip("£").strip().replace(",", ""))
    else:
        raise CellError(f"{col.header}: expected an amount, got '{cell_text(value)}'")
    if amount < 0:
        raise CellError(f"{col.header}: amount must not be negative")
    return amount


def _parse_integer(col: ColumnSpec, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    if isinstance(value, str) and INTEGER_RE.match(value.strip()):
        return int(value.strip())
    raise CellError(f"{col.header}: expected a whole number, got '{cell_text(value)}'")


def _parse_enum(col: ColumnSpec, value: Any) -> str:
    text = cell_text(value).lower()
    if text not in col.choices:
        allowed = ", ".join(col.choices)
        raise CellError(f"{col.header}: '{cell_text(value)}' is not one of {allowed}")
    return text


def _parse_returned(col: ColumnSpec, value: Any) -> ReturnedDate | ReturnedNote:
    # 日付として読めなければ自由記述 (例: "Pending collection") として保持
    try:
        return ReturnedDate(_parse_date(col, value))
    except CellError:
        return ReturnedNote(_parse_text(col, value))


_PARSERS = {
    ColumnKind.TEXT: _parse_text,
    ColumnKind.DATE: _parse_date,
    ColumnKind.TIME: _parse_time,
    ColumnKind.CURRENCY: _parse_currency,
    ColumnKind.INTEGER: _parse_integer,
    ColumnKind.ENUM: _parse_enum,
    ColumnKind.RETURNED: _parse_returned,
}


def _empty_value(col: ColumnSpec) -> Any:
    if col.kind is ColumnKind.CURRENCY:
        return Decimal("0")
    if col.kind is ColumnKind.TEXT or col.kind is ColumnKind.TIME:
        return ""
    return None


def parse_cell(col: ColumnSpec, value: Any) -> Any:
    """Convert one raw cell for ``col``.

    Empty optional cells get the kind's default (0 for currency, "" for
    text/time, None otherwise). Empty required cells raise CellError.
    """
    if is_empty(value):
        if col.required:
            raise CellError(f"{col.header} is required")
        return _empty_value(col)
    try:
        parsed = _PARSERS[col.kind](col, value)
    except (InvalidOperation, OverflowError) as e:
        raise CellError(f"{col.header}: could not read '{cell_text(value)}'") from e
    if col.required and parsed == "":
        raise CellError(f"{col.header} is required")
    return parsed


def format_cell(col: ColumnSpec, value: Any) -> Any:
    """Render a typed value back into the cell form the parser accepts."""
    if value is None:
        return ""
    if col.kind is ColumnKind.DATE:
        return value.strftime(DATE_FMT)
    if col.kind is ColumnKind.CURRENCY:
        amount = Decimal(value)
        # 小数3桁以上は丸めずにそのまま書く (再アップロードで同じ値に戻す)
        if amount.as_tuple().exponent < -2:
            return format(amount, "f")
        return f"{amount:.2f}"
    if col.kind is ColumnKind.RETURNED:
        if isinstance(value, ReturnedDate):
            return value.value.strftime(DATE_FMT)
        return value.text
    if col.kind is ColumnKind.INTEGER:
        return str(value)
    return value
