"""Domain models for the bulk booking import pipeline.

This package contains the transient per-run models (rows, outcomes, results)
and the typed records that are committed to the record store.
"""

from .booking import ParsedBooking, ReturnedDate, ReturnedNote
from .column_spec import ColumnKind, ColumnSpec
from .config_models import ImportConfig, StoreConfig
from .row_outcome import CommitFailure, Parsed, ParseFailure, RawRow, Success
from .upload_result import UploadError, UploadResult, UploadStatus
from .vehicle import ParsedVehicle

__all__ = [
    # Configuration models
    "ImportConfig",
    "StoreConfig",
    # Column contract
    "ColumnKind",
    "ColumnSpec",
    # Records
    "ParsedBooking",
    "ParsedVehicle",
    "ReturnedDate",
    "ReturnedNote",
    # Processing models
    "RawRow",
    "Parsed",
    "Success",
    "ParseFailure",
    "CommitFailure",
    "UploadError",
    "UploadResult",
    "UploadStatus",
]
