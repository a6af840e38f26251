from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the booking import tool.

Built by booking_import.config.loader from config/import.yml after schema
validation. Environment variables take precedence over StoreConfig
connection values (see booking_import.store.postgres.resolve_dsn).
"""


@dataclass(frozen=True)
class StoreConfig:
    """Record store selection and connection fallback."""
    backend: str = "memory"  # memory | postgres
    bookings_table: str = "bookings"
    vehicles_table: str = "vehicles"
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    output_directory: str  # template / error report destination
    error_log_directory: str = "./logs"
    actor: str = "bulk_upload"  # created_by / last_modified_by
    commit_concurrency: int = 1  # 1 = strictly sequential
    strict_headers: bool = True
    store: StoreConfig = field(default_factory=StoreConfig)
