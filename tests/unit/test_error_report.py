from __future__ import annotations

import io

from conftest import read_back
from openpyxl import load_workbook

from booking_import.excel.error_report import ERROR_REPORT_SHEET, export_error_report
from booking_import.models.upload_result import UploadError


def test_error_report_rows_in_given_order():
    errors = [
        UploadError(row=2, reference="CR1", message="Pick Up Date: expected DD/MM/YYYY, got 'x'"),
        UploadError(row=4, reference="", message="Customer Name is required"),
        UploadError(row=7, reference="CR7", message="duplicate booking reference CR7", kind="commit"),
    ]
    df = read_back(export_error_report(errors))
    assert df.shape == (4, 3)
    assert df.iloc[0].tolist() == ["Row", "Booking Reference", "Error"]
    assert df.iloc[1].tolist() == [2, "CR1", "Pick Up Date: expected DD/MM/YYYY, got 'x'"]
    assert df.iloc[2].tolist() == [4, "Unknown", "Customer Name is required"]
    assert df.iloc[3].tolist() == [7, "CR7", "duplicate booking reference CR7"]


def test_error_report_sheet_and_widths():
    wb = load_workbook(io.BytesIO(export_error_report([], reference_header="Registration")))
    ws = wb[ERROR_REPORT_SHEET]
    assert [c.value for c in ws[1]] == ["Row", "Registration", "Error"]
    assert ws.column_dimensions["A"].width == 8
    assert ws.column_dimensions["C"].width == 60
    assert ws.max_row == 1
