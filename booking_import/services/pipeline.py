from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from booking_import.excel.reader import (
    HeaderMismatchError,
    WorkbookReadError,
    check_header,
    iter_raw_rows,
    read_first_sheet,
)
from booking_import.logging.error_log import ErrorLogBuffer
from booking_import.models.column_spec import headers
from booking_import.models.config_models import ImportConfig
from booking_import.models.error_record import COMMIT_ERROR, FILE_ERROR, PARSE_ERROR, ErrorRecord
from booking_import.models.row_outcome import CommitFailure, Parsed, ParseFailure, Success
from booking_import.models.upload_result import UploadResult
from booking_import.services.admission import AdmissionError, ensure_admitted
from booking_import.services.aggregator import aggregate
from booking_import.services.committer import commit_all
from booking_import.services.layouts import ImportLayout
from booking_import.services.progress import RowProgress
from booking_import.services.row_parser import parse_rows
from booking_import.store.base import RecordStore

"""Import pipeline orchestration.

admission -> read first sheet -> header check -> parse rows -> commit
parsed rows -> aggregate.

Only two things abort a run: a rejected upload (AdmissionError, nothing
read) and a workbook that cannot be read as the expected layout
(ImportFileError). Row failures are values, never exceptions.
"""

__all__ = [
    "AdmissionError",
    "ImportFileError",
    "run_import",
    "run_import_path",
]

logger = logging.getLogger(__name__)


class ImportFileError(Exception):
    """The upload passed admission but is not a readable workbook in the layout."""


def _log_failures(
    error_log: ErrorLogBuffer | None,
    file_name: str,
    sheet: str,
    failures: list[ParseFailure | CommitFailure],
) -> None:
    if error_log is None:
        return
    for f in failures:
        error_type = PARSE_ERROR if isinstance(f, ParseFailure) else COMMIT_ERROR
        error_log.append(ErrorRecord.create(file_name, sheet, f.row, error_type, f.reference, f.message))


async def run_import(
    file_name: str,
    data: bytes,
    layout: ImportLayout,
    store: RecordStore,
    *,
    config: ImportConfig | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> UploadResult:
    """Import one uploaded workbook.

    Args:
        file_name: Name the file was uploaded with (extension is checked)
        data: Raw workbook bytes
        layout: Column layout and record builder
        store: Record store collaborator (create() per parsed row)
        config: Actor, commit concurrency and header strictness
        error_log: Optional JSON Lines buffer receiving every row failure

    Returns:
        UploadResult with errors ascending by row

    Raises:
        AdmissionError: wrong extension or file too large (nothing processed)
        ImportFileError: workbook undecodable or header row not the layout's
    """
    start_time = datetime.now(UTC)
    actor = config.actor if config else "bulk_upload"
    concurrency = config.commit_concurrency if config else 1
    strict_headers = config.strict_headers if config else True

    ensure_admitted(file_name, len(data))

    try:
        df = read_first_sheet(data)
        if strict_headers:
            check_header(df, headers(layout.columns))
    except (WorkbookReadError, HeaderMismatchError) as e:
        if error_log is not None:
            error_log.append(ErrorRecord.create(file_name, layout.name, -1, FILE_ERROR, "", str(e)))
        raise ImportFileError(str(e)) from e

    raw_rows = list(iter_raw_rows(df))
    if not raw_rows:
        logger.info("file=%s has no data rows, nothing to import", file_name)
        return aggregate(
            [], file_name=file_name, layout=layout.name, start_time=start_time, end_time=datetime.now(UTC)
        )

    parsed_outcomes = parse_rows(raw_rows, layout, actor)
    parsed = [o for o in parsed_outcomes if isinstance(o, Parsed)]
    parse_failures = [o for o in parsed_outcomes if isinstance(o, ParseFailure)]
    logger.info(
        "file=%s rows=%d parsed=%d parse_failed=%d",
        file_name,
        len(raw_rows),
        len(parsed),
        len(parse_failures),
    )

    with RowProgress(len(parsed), description=f"Importing {layout.name}") as progress:
        commit_outcomes = await commit_all(parsed, store, concurrency=concurrency, progress=progress)

    commit_failures = [o for o in commit_outcomes if isinstance(o, CommitFailure)]
    _log_failures(error_log, file_name, layout.name, [*parse_failures, *commit_failures])

    outcomes: list[Success | ParseFailure | CommitFailure] = [*parse_failures, *commit_outcomes]
    result = aggregate(
        outcomes,
        file_name=file_name,
        layout=layout.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
    )
    logger.debug("file=%s status=%s errors=%d", file_name, result.status.value, len(result.errors))
    return result


async def run_import_path(
    path: Path,
    layout: ImportLayout,
    store: RecordStore,
    *,
    config: ImportConfig | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> UploadResult:
    """run_import() for a file on disk.

    The size ceiling is checked from the file system before reading.
    """
    ensure_admitted(path.name, path.stat().st_size)
    return await run_import(path.name, path.read_bytes(), layout, store, config=config, error_log=error_log)
