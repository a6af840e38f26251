# Shared pytest fixtures
from __future__ import annotations

import io
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from booking_import.logging.init import APP_LOGGER_NAME, reset_logging
from booking_import.services.layouts import BOOKING_COLUMNS, VEHICLE_COLUMNS

BOOKING_HEADER = [c.header for c in BOOKING_COLUMNS]
VEHICLE_HEADER = [c.header for c in VEHICLE_COLUMNS]

VALID_BOOKING = {
    "Booking Confirmation Date": "25/01/2025",
    "Supplier": "Enterprise",
    "Reference": "ENT123",
    "Coastr Reference": "CR2025001",
    "SAGE INV": "INV-2025-001",
    "Notes": "Urgent booking",
    "Customer Name": "John Smith",
    "Phone Number": "07123456789",
    "Group": "Economy",
    "Registration": "ab12 cde",
    "Make & Model": "Ford Focus",
    "Pick Up Date": "26/01/2025",
    "Pick Up Time": "09:00",
    "Pick Up Location": "London Heathrow",
    "Drop Off Date": "28/01/2025",
    "Drop Off Time": "17:00",
    "Drop Off Location": "London Heathrow",
    "No of Days": "2",
    "Hire Charge incl Vat": "150.00",
    "Insurance": "25.00",
    "Additional Income": "50.00",
    "Additional Income Reason": "Additional driver fee",
    "Extras": "15.00",
    "Extras Type": "GPS Navigation",
    "Deposit TO BE Collected @ Branch": "200.00",
    "Charges Income": "0.00",
    "Paid To Us": "440.00",
    "Deposit": "200.00",
    "Returned Date": "30/01/2025",
    "Comments": "Customer satisfied",
}

VALID_VEHICLE = {
    "Registration": "AB12 CDE",
    "VIN Number": "WBA12345678901234",
    "Make": "Ford",
    "Model": "Focus",
    "Colour": "Blue",
    "Size": "medium",
    "MOT Expiry (DD/MM/YYYY)": "15/06/2025",
    "Tax Expiry (DD/MM/YYYY)": "01/03/2025",
    "Comments": "Regular service needed",
}


def booking_cells(**overrides: Any) -> list[Any]:
    """Valid booking row in template order; override by header label."""
    values = {**VALID_BOOKING, **overrides}
    return [values[h] for h in BOOKING_HEADER]


def vehicle_cells(**overrides: Any) -> list[Any]:
    values = {**VALID_VEHICLE, **overrides}
    return [values[h] for h in VEHICLE_HEADER]


def workbook_bytes(rows: list[list[Any]], sheet_name: str = "Sheet1") -> bytes:
    """Build an .xlsx from raw rows (first row is written as-is, no pandas header)."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return buffer.getvalue()


def read_back(data: bytes) -> pd.DataFrame:
    return pd.read_excel(io.BytesIO(data), header=None, dtype=object)


@pytest.fixture()
def make_workbook() -> Callable[..., bytes]:
    return workbook_bytes


@pytest.fixture()
def booking_workbook() -> Callable[[list[list[Any]]], bytes]:
    def _build(data_rows: list[list[Any]]) -> bytes:
        return workbook_bytes([BOOKING_HEADER, *data_rows])
    return _build


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
error_log_directory: ./logs
actor: bulk_upload
commit_concurrency: 1
strict_headers: true
store:
  backend: memory
  bookings_table: bookings
  vehicles_table: vehicles
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()
    # capsys のストリームを掴んだハンドラを次のテストに残さない
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
