from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import patch

from conftest import BOOKING_HEADER, booking_cells, workbook_bytes

from booking_import.cli.__main__ import (
    EXIT_ALL_FAILED,
    EXIT_FATAL,
    EXIT_PARTIAL_FAILURE,
    EXIT_SUCCESS_ALL,
    main,
)
from booking_import.store.base import StoreError


def _upload(root: Path, rows: list[list], name: str = "bookings.xlsx") -> Path:
    p = root / "data" / name
    p.write_bytes(workbook_bytes([BOOKING_HEADER, *rows]))
    return p


def _import(path: Path, *extra: str) -> int:
    return main(["import", str(path), "--config", "config/import.yml", *extra])


def test_all_rows_committed_exit_0(write_config, temp_workdir):
    path = _upload(temp_workdir, [booking_cells(), booking_cells(**{"Coastr Reference": "CR2"})])
    assert _import(path) == EXIT_SUCCESS_ALL
    assert not (temp_workdir / "out" / "booking_upload_errors.xlsx").exists()


def test_partial_exit_2_writes_error_report(write_config, temp_workdir):
    path = _upload(temp_workdir, [booking_cells(), booking_cells(**{"Pick Up Date": "bad"})])
    assert _import(path) == EXIT_PARTIAL_FAILURE
    assert (temp_workdir / "out" / "booking_upload_errors.xlsx").exists()


def test_all_failed_exit_3(write_config, temp_workdir):
    path = _upload(temp_workdir, [booking_cells(**{"Customer Name": None})])
    report = temp_workdir / "custom" / "errors.xlsx"
    assert _import(path, "--error-report", str(report)) == EXIT_ALL_FAILED
    assert report.exists()


def test_header_only_exit_0(write_config, temp_workdir, capsys):
    path = _upload(temp_workdir, [])
    assert _import(path) == EXIT_SUCCESS_ALL
    assert "status=empty" in capsys.readouterr().out


def test_bad_extension_exit_1(write_config, temp_workdir, capsys):
    path = temp_workdir / "data" / "bookings.csv"
    path.write_text("a,b\n", encoding="utf-8")
    assert _import(path) == EXIT_FATAL
    assert "ERROR admission: Please upload an Excel file (.xlsx or .xls)" in capsys.readouterr().out


def test_header_mismatch_exit_1(write_config, temp_workdir, capsys):
    path = temp_workdir / "data" / "bookings.xlsx"
    path.write_bytes(workbook_bytes([["Wrong", "Header"], ["a", "b"]]))
    assert _import(path) == EXIT_FATAL
    assert "ERROR file: column 1" in capsys.readouterr().out


def test_missing_file_exit_1(write_config, temp_workdir):
    assert _import(temp_workdir / "data" / "missing.xlsx") == EXIT_FATAL


def test_missing_config_exit_1(temp_workdir, capsys):
    path = _upload(temp_workdir, [booking_cells()])
    assert _import(path) == EXIT_FATAL
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_template_exit_0(temp_workdir):
    assert main(["template", "--layout", "vehicles", "--output", "out"]) == EXIT_SUCCESS_ALL
    assert (temp_workdir / "out" / f"vehicle_template_{date.today():%Y-%m-%d}.xlsx").exists()


def test_inspect_prints_rows(temp_workdir, capsys):
    path = _upload(temp_workdir, [booking_cells(), booking_cells(**{"Pick Up Date": "bad"})])
    assert main(["inspect", str(path), "--rows", "5"]) == EXIT_SUCCESS_ALL
    out = capsys.readouterr().out
    assert "row 2: ok reference=CR2025001" in out
    assert "row 3: error Pick Up Date: expected DD/MM/YYYY, got 'bad'" in out


def test_unreachable_store_exit_1(write_config, temp_workdir, capsys):
    path = _upload(temp_workdir, [booking_cells()])
    with patch("booking_import.cli.__main__._open_store", side_effect=StoreError("could not connect: refused")):
        assert _import(path) == EXIT_FATAL
    assert "ERROR store: could not connect: refused" in capsys.readouterr().out
