from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from booking_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from booking_import.excel.error_report import export_error_report
from booking_import.excel.reader import WorkbookReadError, header_cells, iter_raw_rows, read_first_sheet
from booking_import.excel.template import generate_template, template_filename
from booking_import.logging.error_log import ErrorLogBuffer
from booking_import.logging.init import get_logger, log_summary, set_debug, setup_logging
from booking_import.models.config_models import ImportConfig
from booking_import.models.row_outcome import Parsed
from booking_import.models.upload_result import UploadStatus
from booking_import.services.layouts import LAYOUTS, ImportLayout, get_layout
from booking_import.services.pipeline import AdmissionError, ImportFileError, run_import_path
from booking_import.services.row_parser import parse_rows
from booking_import.services.summary import render_error_lines, render_summary_line
from booking_import.store.base import RecordStore, StoreError
from booking_import.store.memory import InMemoryRecordStore

"""CLI entrypoint.

Subcommands:
- template: write the header-only upload template for a layout
- import:   run the bulk import pipeline for one workbook
- inspect:  print the header and first parsed rows of a workbook
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_ALL_FAILED = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so its database settings take precedence."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="booking-import", description="Bulk booking spreadsheet importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    t = sub.add_parser("template", help="Write the upload template")
    t.add_argument("--layout", choices=sorted(LAYOUTS), default="bookings")
    t.add_argument("--output", type=Path, default=Path("."), help="Directory for the template")

    i = sub.add_parser("import", help="Import a workbook")
    i.add_argument("file", type=Path)
    i.add_argument("--layout", choices=sorted(LAYOUTS), default="bookings")
    i.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH)
    i.add_argument("--error-report", type=Path, default=None, help="Error report path (default: output_directory)")

    s = sub.add_parser("inspect", help="Print header and first parsed rows")
    s.add_argument("file", type=Path)
    s.add_argument("--layout", choices=sorted(LAYOUTS), default="bookings")
    s.add_argument("--rows", type=int, default=3)
    return p.parse_args(argv)


def _open_store(cfg: ImportConfig, layout: ImportLayout) -> RecordStore:
    if cfg.store.backend == "postgres":
        from booking_import.store.postgres import PostgresRecordStore

        table = cfg.store.bookings_table if layout.name == "bookings" else cfg.store.vehicles_table
        return PostgresRecordStore.connect(cfg.store, table)
    # 車両は登録番号の重複を拒否 (予約参照番号は重複可)
    return InMemoryRecordStore(unique_field="registration" if layout.name == "vehicles" else None)


def _cmd_template(args: argparse.Namespace) -> int:
    logger = get_logger()
    layout = get_layout(args.layout)
    args.output.mkdir(parents=True, exist_ok=True)
    target = args.output / template_filename(layout.template_basename, date.today())
    target.write_bytes(generate_template(layout))
    logger.info(f"template written: {target}")
    return EXIT_SUCCESS_ALL


def _cmd_inspect(args: argparse.Namespace) -> int:
    layout = get_layout(args.layout)
    try:
        df = read_first_sheet(args.file)
    except WorkbookReadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {args.file.name}")
    print(f"  header={header_cells(df)}")
    rows = list(iter_raw_rows(df))[: max(args.rows, 0)]
    for outcome in parse_rows(rows, layout):
        if isinstance(outcome, Parsed):
            print(f"  row {outcome.row}: ok reference={outcome.reference}")
        else:
            print(f"  row {outcome.row}: error {outcome.message}")
    return EXIT_SUCCESS_ALL


def _cmd_import(args: argparse.Namespace) -> int:
    logger = get_logger()
    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.file.exists():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL

    layout = get_layout(args.layout)
    try:
        store = _open_store(cfg, layout)
    except StoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(Path(cfg.error_log_directory))
    logger.info(f"Importing {layout.name} from: {args.file}")
    try:
        result = asyncio.run(run_import_path(args.file, layout, store, config=cfg, error_log=error_log))
    except AdmissionError as e:
        logger.error(f"admission: {e}")
        return EXIT_FATAL
    except ImportFileError as e:
        logger.error(f"file: {e}")
        return EXIT_FATAL
    finally:
        close = getattr(store, "close", None)
        if close is not None:
            close()
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log: {log_path}")

    if result.status is UploadStatus.EMPTY:
        logger.warning("no data rows found in the file, nothing imported")
    for line in render_error_lines(result):
        logger.warning(line)

    if result.errors:
        report = args.error_report or Path(cfg.output_directory) / layout.error_report_filename
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_bytes(export_error_report(result.errors, layout.reference_header))
        logger.info(f"error report written: {report}")

    # log_summary adds the "SUMMARY " prefix
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.status is UploadStatus.PARTIAL:
        return EXIT_PARTIAL_FAILURE
    if result.status is UploadStatus.FAILED:
        return EXIT_ALL_FAILED
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()
    # None のときのみシステム引数を読む ([] はそのまま使う)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug()

    if args.command == "template":
        return _cmd_template(args)
    if args.command == "inspect":
        return _cmd_inspect(args)
    if args.command == "import":
        return _cmd_import(args)
    logger.error(f"unknown command: {args.command}")  # pragma: no cover
    return EXIT_FATAL  # pragma: no cover


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
