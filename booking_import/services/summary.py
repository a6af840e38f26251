from __future__ import annotations

from booking_import.models.upload_result import UploadResult

"""SUMMARY line rendering for the import CLI."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: UploadResult) -> str:
    """Render the SUMMARY line for one import run.

    Format:
    SUMMARY file={name} rows={total} success={s} failed={f} status={status} elapsed_sec={t}

    Examples:
        >>> from booking_import.models.upload_result import UploadResult
        >>> render_summary_line(UploadResult(success_count=3, failed_count=2, file_name="b.xlsx"))
        'SUMMARY file=b.xlsx rows=5 success=3 failed=2 status=partial elapsed_sec=0'
    """
    return (
        f"SUMMARY file={result.file_name} "
        f"rows={result.total_rows} "
        f"success={result.success_count} "
        f"failed={result.failed_count} "
        f"status={result.status.value} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def render_error_lines(result: UploadResult, limit: int = 10) -> list[str]:
    """First ``limit`` errors as ``Row N (REF): message`` plus an overflow line."""
    lines = [f"Row {e.row} ({e.reference}): {e.message}" for e in result.errors[:limit]]
    if len(result.errors) > limit:
        lines.append(f"... and {len(result.errors) - limit} more errors")
    return lines
