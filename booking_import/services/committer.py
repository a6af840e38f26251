from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from booking_import.models.row_outcome import CommitFailure, Parsed, Success
from booking_import.services.progress import RowProgress
from booking_import.store.base import RecordStore, describe_store_error

"""Batch committer.

Each parsed record is written with its own store.create() call. A rejected
write becomes a CommitFailure for that row and the next row is still
attempted. No retries here; retry policy belongs to the store.

With concurrency=1 (default) rows are awaited one at a time in row order.
With concurrency>1 at most that many creates are in flight; outcomes are
sorted back into row order before returning.
"""

__all__ = [
    "commit_one",
    "commit_all",
]

logger = logging.getLogger(__name__)


async def commit_one(item: Parsed, store: RecordStore) -> Success | CommitFailure:
    try:
        record_id = await store.create(item.record)
    except Exception as e:  # 行単位で捕捉し、次の行へ進む
        message = describe_store_error(e)
        logger.debug("row=%d commit failed reference=%s: %s", item.row, item.reference, message)
        return CommitFailure(row=item.row, reference=item.reference, message=message)
    return Success(row=item.row, record=item.record, record_id=str(record_id))


async def commit_all(
    items: Sequence[Parsed],
    store: RecordStore,
    *,
    concurrency: int = 1,
    progress: RowProgress | None = None,
) -> list[Success | CommitFailure]:
    """Commit every parsed record independently.

    Returns one outcome per item, ascending by row.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    def _advance(outcome: Success | CommitFailure) -> None:
        if progress is not None:
            progress.advance(isinstance(outcome, Success))

    if concurrency == 1:
        outcomes: list[Success | CommitFailure] = []
        for item in items:
            outcome = await commit_one(item, store)
            _advance(outcome)
            outcomes.append(outcome)
        return outcomes

    semaphore = asyncio.Semaphore(concurrency)

    async def _bounded(item: Parsed) -> Success | CommitFailure:
        async with semaphore:
            outcome = await commit_one(item, store)
        _advance(outcome)
        return outcome

    results = await asyncio.gather(*(_bounded(i) for i in items))
    return sorted(results, key=lambda o: o.row)
