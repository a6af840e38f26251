from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

__all__ = [
    "ParsedVehicle",
    "VEHICLE_SIZES",
]

VEHICLE_SIZES = ("small", "medium", "large", "van", "suv")


@dataclass(frozen=True)
class ParsedVehicle:
    """Fleet vehicle row from the vehicle bulk upload sheet."""
    registration: str
    make: str
    model: str
    vin_number: str = ""
    colour: str = ""
    size: str | None = None
    mot_expiry: date | None = None
    tax_expiry: date | None = None
    comments: str = ""
    status: str = "available"
    created_by: str = "bulk_upload"
    last_modified_by: str = "bulk_upload"

    @property
    def reference(self) -> str:
        return self.registration

    def to_record(self) -> dict[str, Any]:
        return asdict(self)
