from __future__ import annotations

import asyncio
import os
import re
from typing import Any

import psycopg2
import psycopg2.extras

from booking_import.models.config_models import StoreConfig
from booking_import.store.base import StoreError, describe_store_error

"""PostgreSQL record store (psycopg2).

Each create() is one INSERT ... RETURNING id on an autocommit connection,
so a rejected row never rolls back the rows committed before it. The
blocking driver call runs in a worker thread (asyncio.to_thread).

Connection settings resolve in this order:
    1. DATABASE_URL / PGDSN (whole DSN)
    2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. the ``store`` section of config/import.yml
"""

__all__ = [
    "PostgresRecordStore",
    "resolve_dsn",
]

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _ident(name: str) -> str:
    if not _IDENT_RE.match(name):
        raise StoreError(f"invalid identifier: {name!r}")
    return f'"{name}"'


def resolve_dsn(cfg: StoreConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", cfg.host or "localhost")
    port = os.getenv("PGPORT", str(cfg.port) if cfg.port else "5432")
    user = os.getenv("PGUSER", cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", cfg.password or "")
    database = os.getenv("PGDATABASE", cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


class PostgresRecordStore:
    """Record store backed by one PostgreSQL table with an ``id`` column."""

    def __init__(self, connection: Any, table: str) -> None:
        self.connection = connection
        self.table = _ident(table)

    @classmethod
    def connect(cls, cfg: StoreConfig, table: str) -> PostgresRecordStore:
        try:
            conn = psycopg2.connect(resolve_dsn(cfg))
        except psycopg2.Error as e:
            raise StoreError(f"could not connect: {describe_store_error(e)}") from e
        # 行単位で確定させる (1行の失敗で他行をロールバックしない)
        conn.autocommit = True
        return cls(conn, table)

    def close(self) -> None:
        if self.connection is not None and not self.connection.closed:
            self.connection.close()

    def _execute(self, sql: str, params: tuple[Any, ...], fetch: str | None = None) -> Any:
        with self.connection.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(sql, params)
            if fetch == "one":
                return cur.fetchone()
            if fetch == "all":
                return cur.fetchall()
            return None

    async def _run(self, sql: str, params: tuple[Any, ...], fetch: str | None = None) -> Any:
        try:
            return await asyncio.to_thread(self._execute, sql, params, fetch)
        except psycopg2.Error as e:
            raise StoreError(describe_store_error(e)) from e

    async def create(self, record: Any) -> str:
        data = record.to_record() if hasattr(record, "to_record") else dict(record)
        columns = list(data)
        cols_sql = ",".join(_ident(c) for c in columns)
        placeholders = ",".join(["%s"] * len(columns))
        sql = f"INSERT INTO {self.table} ({cols_sql}) VALUES ({placeholders}) RETURNING id"
        row = await self._run(sql, tuple(data[c] for c in columns), fetch="one")
        if not row:
            raise StoreError("insert returned no id")
        return str(row["id"])

    async def update(self, record_id: str, changes: dict[str, Any]) -> None:
        changes = {k: v for k, v in changes.items() if k != "id"}
        if not changes:
            return
        assignments = ",".join(f"{_ident(k)} = %s" for k in changes)
        sql = f"UPDATE {self.table} SET {assignments} WHERE id = %s"
        await self._run(sql, (*changes.values(), record_id))

    async def get(self, record_id: str) -> dict[str, Any] | None:
        row = await self._run(f"SELECT * FROM {self.table} WHERE id = %s", (record_id,), fetch="one")
        return dict(row) if row else None

    async def query(self, **filters: Any) -> list[dict[str, Any]]:
        sql = f"SELECT * FROM {self.table}"
        if filters:
            sql += " WHERE " + " AND ".join(f"{_ident(k)} = %s" for k in filters)
        rows = await self._run(sql, tuple(filters.values()), fetch="all")
        return [dict(r) for r in rows]
