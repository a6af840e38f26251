from __future__ import annotations

import uuid
from typing import Any

from booking_import.store.base import StoreError

"""In-memory record store (mock mode and tests)."""

__all__ = [
    "InMemoryRecordStore",
]


class InMemoryRecordStore:
    """Dict-backed store keyed by generated uuid.

    With ``unique_field`` set, create() rejects a record whose value for
    that field already exists (case-insensitive).
    """

    def __init__(self, unique_field: str | None = None) -> None:
        self.unique_field = unique_field
        self.records: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self.records)

    async def create(self, record: Any) -> str:
        data = record.to_record() if hasattr(record, "to_record") else dict(record)
        if self.unique_field is not None:
            value = str(data.get(self.unique_field, "")).upper()
            for existing in self.records.values():
                if str(existing.get(self.unique_field, "")).upper() == value:
                    raise StoreError(f"{self.unique_field} already exists")
        record_id = uuid.uuid4().hex
        self.records[record_id] = {"id": record_id, **data}
        return record_id

    async def update(self, record_id: str, changes: dict[str, Any]) -> None:
        if record_id not in self.records:
            raise StoreError(f"record not found: {record_id}")
        changes = {k: v for k, v in changes.items() if k != "id"}
        self.records[record_id].update(changes)

    async def get(self, record_id: str) -> dict[str, Any] | None:
        found = self.records.get(record_id)
        return dict(found) if found is not None else None

    async def query(self, **filters: Any) -> list[dict[str, Any]]:
        return [
            dict(r) for r in self.records.values()
            if all(r.get(k) == v for k, v in filters.items())
        ]
