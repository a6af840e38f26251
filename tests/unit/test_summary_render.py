from __future__ import annotations

from datetime import UTC, datetime, timedelta

from booking_import.models.upload_result import UploadError, UploadResult
from booking_import.services.summary import render_error_lines, render_summary_line


def test_summary_line_fields():
    start = datetime(2025, 1, 1, tzinfo=UTC)
    result = UploadResult(
        success_count=3,
        failed_count=2,
        file_name="bookings.xlsx",
        start_time=start,
        end_time=start + timedelta(seconds=1.25),
    )
    assert render_summary_line(result) == (
        "SUMMARY file=bookings.xlsx rows=5 success=3 failed=2 status=partial elapsed_sec=1.25"
    )


def test_summary_line_empty():
    line = render_summary_line(UploadResult(success_count=0, failed_count=0, file_name="t.xlsx"))
    assert line.endswith("rows=0 success=0 failed=0 status=empty elapsed_sec=0")


def test_error_lines_are_capped():
    errors = [UploadError(row=i, reference=f"CR{i}", message="bad") for i in range(2, 15)]
    lines = render_error_lines(UploadResult(success_count=0, failed_count=len(errors), errors=errors))
    assert lines[0] == "Row 2 (CR2): bad"
    assert len(lines) == 11
    assert lines[-1] == "... and 3 more errors"
