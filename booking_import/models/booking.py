from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any

"""Booking domain record produced by the bulk import.

ParsedBooking is only built once every required column of a row parsed.
The returned/deposit column is either a date or a free-text note, kept as
a tagged value so the store does not have to sniff strings again.
"""

__all__ = [
    "ParsedBooking",
    "ReturnedDate",
    "ReturnedNote",
    "Returned",
]


@dataclass(frozen=True)
class ReturnedDate:
    value: date


@dataclass(frozen=True)
class ReturnedNote:
    text: str  # e.g. "Pending collection"


Returned = ReturnedDate | ReturnedNote


@dataclass(frozen=True)
class ParsedBooking:
    """Typed booking row (column order of the booking template)."""
    booking_confirmation_date: date
    booking_reference: str  # "Coastr Reference" (internal reference)
    customer_name: str
    registration: str
    pick_up_date: date
    pick_up_location: str
    drop_off_date: date
    drop_off_location: str
    supplier: str = ""
    supplier_reference: str = ""
    invoice_reference: str = ""  # SAGE INV
    notes: str = ""
    phone_number: str = ""
    vehicle_group: str = ""
    make_model: str = ""
    make: str = ""
    model: str = ""
    pick_up_time: str = ""
    drop_off_time: str = ""
    no_of_days: int | None = None
    hire_charge_incl_vat: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    additional_income: Decimal = Decimal("0")
    additional_income_reason: str = ""
    extras: Decimal = Decimal("0")
    extras_type: str = ""
    deposit_to_be_collected: Decimal = Decimal("0")
    deposit_status: str | None = None  # "Yes" when a deposit is due at branch
    charges_income: Decimal = Decimal("0")
    paid_to_us: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")
    returned: Returned | None = None
    comments: str = ""
    created_by: str = "bulk_upload"
    last_modified_by: str = "bulk_upload"

    @property
    def reference(self) -> str:
        return self.booking_reference

    def to_record(self) -> dict[str, Any]:
        """Flatten into a store document.

        ``returned`` is split into ``returned_date`` / ``returned_note``.
        """
        data = asdict(self)
        data.pop("returned", None)
        data["returned_date"] = self.returned.value if isinstance(self.returned, ReturnedDate) else None
        data["returned_note"] = self.returned.text if isinstance(self.returned, ReturnedNote) else None
        return data
