from __future__ import annotations

import io
from datetime import datetime

import pandas as pd
import pytest
from conftest import BOOKING_HEADER, booking_cells, workbook_bytes

from booking_import.excel.reader import (
    HeaderMismatchError,
    WorkbookReadError,
    check_header,
    header_cells,
    iter_raw_rows,
    read_first_sheet,
)


def test_read_first_sheet_from_bytes_path_and_stream(tmp_path):
    data = workbook_bytes([["A", "B"], ["1", "2"]])
    p = tmp_path / "w.xlsx"
    p.write_bytes(data)
    for source in (data, p, io.BytesIO(data)):
        df = read_first_sheet(source)
        assert header_cells(df) == ["A", "B"]
        assert df.shape == (2, 2)


def test_only_first_sheet_is_read():
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame([["first"]]).to_excel(writer, sheet_name="One", header=False, index=False)
        pd.DataFrame([["second"]]).to_excel(writer, sheet_name="Two", header=False, index=False)
    df = read_first_sheet(buffer.getvalue())
    assert header_cells(df) == ["first"]


def test_undecodable_bytes_raise_read_error():
    with pytest.raises(WorkbookReadError, match="could not read spreadsheet"):
        read_first_sheet(b"definitely not a workbook")


def test_check_header_accepts_case_and_whitespace_differences():
    df = read_first_sheet(workbook_bytes([[" pick up date ", "DROP OFF DATE"]]))
    check_header(df, ["Pick Up Date", "Drop Off Date"])


def test_check_header_reports_first_mismatch():
    df = read_first_sheet(workbook_bytes([["Pick Up Date", "Location"]]))
    with pytest.raises(HeaderMismatchError) as e:
        check_header(df, ["Pick Up Date", "Drop Off Date"])
    assert str(e.value) == "column 2: expected header 'Drop Off Date', found 'Location'"


def test_check_header_missing_trailing_columns():
    df = read_first_sheet(workbook_bytes([["Pick Up Date"]]))
    with pytest.raises(HeaderMismatchError, match="column 2"):
        check_header(df, ["Pick Up Date", "Drop Off Date"])


def test_check_header_allows_extra_trailing_columns():
    df = read_first_sheet(workbook_bytes([[*BOOKING_HEADER, "Internal Notes"]]))
    check_header(df, BOOKING_HEADER)


def test_check_header_empty_frame_passes():
    check_header(pd.DataFrame(), BOOKING_HEADER)


def test_iter_raw_rows_numbers_from_two_and_skips_blank_rows():
    rows = [BOOKING_HEADER, booking_cells(), [None] * len(BOOKING_HEADER), booking_cells()]
    df = read_first_sheet(workbook_bytes(rows))
    raw = list(iter_raw_rows(df))
    assert [r.row_number for r in raw] == [2, 4]
    assert raw[0].cell(6) == "John Smith"
    assert raw[0].cell(200) is None


def test_iter_raw_rows_header_only():
    df = read_first_sheet(workbook_bytes([BOOKING_HEADER]))
    assert list(iter_raw_rows(df)) == []


def test_native_date_cells_survive():
    df = read_first_sheet(workbook_bytes([["Pick Up Date"], [datetime(2025, 1, 26)]]))
    (raw,) = iter_raw_rows(df)
    assert isinstance(raw.cell(0), datetime)


def test_na_like_text_is_kept_as_text():
    rows = [
        BOOKING_HEADER,
        booking_cells(**{"Returned Date": "N/A", "Notes": "None"}),
        booking_cells(**{"Customer Name": "NA", "Coastr Reference": "NULL"}),
    ]
    df = read_first_sheet(workbook_bytes(rows))
    first, second = iter_raw_rows(df)
    assert first.cell(28) == "N/A"
    assert first.cell(5) == "None"
    assert second.cell(6) == "NA"
    assert second.cell(3) == "NULL"


def test_blank_cells_still_empty_without_na_conversion():
    rows = [BOOKING_HEADER, booking_cells(Notes=None), [None] * len(BOOKING_HEADER), booking_cells()]
    df = read_first_sheet(workbook_bytes(rows))
    raw = list(iter_raw_rows(df))
    assert [r.row_number for r in raw] == [2, 4]
    assert raw[0].cell(5) is None
