from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from booking_import.models.row_outcome import CommitFailure, ParseFailure, Success
from booking_import.models.upload_result import UploadError, UploadResult

"""Result aggregator: row outcomes -> UploadResult.

Parse and commit failures are merged into one ascending-by-row error list.
A row fails at most once (a parse failure is never committed), so nothing
is deduplicated.
"""

__all__ = [
    "aggregate",
    "to_upload_error",
]


def to_upload_error(outcome: ParseFailure | CommitFailure) -> UploadError:
    if isinstance(outcome, ParseFailure):
        return UploadError(
            row=outcome.row,
            reference=outcome.reference,
            message=outcome.message,
            field=outcome.field,
            kind="parse",
        )
    return UploadError(row=outcome.row, reference=outcome.reference, message=outcome.message, kind="commit")


def aggregate(
    outcomes: Iterable[Success | ParseFailure | CommitFailure],
    *,
    file_name: str = "",
    layout: str = "",
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> UploadResult:
    successes: list[Success] = []
    failures: list[ParseFailure | CommitFailure] = []
    for outcome in outcomes:
        if isinstance(outcome, Success):
            successes.append(outcome)
        else:
            failures.append(outcome)
    # sorted は安定ソート: 同一行の順序は入力順のまま
    failures.sort(key=lambda f: f.row)
    successes.sort(key=lambda s: s.row)
    return UploadResult(
        success_count=len(successes),
        failed_count=len(failures),
        errors=[to_upload_error(f) for f in failures],
        record_ids=[s.record_id for s in successes],
        file_name=file_name,
        layout=layout,
        start_time=start_time,
        end_time=end_time,
    )
