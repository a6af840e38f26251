from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

"""Record store collaborator interface.

The import pipeline only calls ``create``; update/get/query are the rest of
the collaborator surface used by callers and tests.
"""

__all__ = [
    "RecordStore",
    "StoreError",
    "describe_store_error",
]


class StoreError(Exception):
    pass


@runtime_checkable
class RecordStore(Protocol):
    async def create(self, record: Any) -> str: ...

    async def update(self, record_id: str, changes: dict[str, Any]) -> None: ...

    async def get(self, record_id: str) -> dict[str, Any] | None: ...

    async def query(self, **filters: Any) -> list[dict[str, Any]]: ...


def describe_store_error(exc: BaseException) -> str:
    """Human readable message for a rejected write.

    Prefers the first line of a driver message (psycopg2 ``pgerror``), then
    ``str(exc)``, then the exception class name.
    """
    pgerror = getattr(exc, "pgerror", None)
    if isinstance(pgerror, str) and pgerror.strip():
        return pgerror.strip().splitlines()[0]
    cause = exc.__cause__
    if isinstance(exc, StoreError) and cause is not None and not str(exc):
        return describe_store_error(cause)
    text = str(exc).strip()
    return text or type(exc).__name__
