from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from booking_import.models.booking import ParsedBooking
from booking_import.models.column_spec import ColumnKind, ColumnSpec
from booking_import.models.vehicle import VEHICLE_SIZES, ParsedVehicle

"""Import layouts: one ColumnSpec tuple bound to the record it builds.

BOOKING_COLUMNS / VEHICLE_COLUMNS are the single source of column order for
the template, the parser, record export and the error report.
"""

__all__ = [
    "ImportLayout",
    "RowRuleError",
    "BOOKING_COLUMNS",
    "VEHICLE_COLUMNS",
    "BOOKING_LAYOUT",
    "VEHICLE_LAYOUT",
    "LAYOUTS",
    "get_layout",
]

# UK registration formats (current, prefix, suffix, dateless numeric)
UK_REGISTRATION = (
    r"[A-Z]{2}\d{2}\s?[A-Z]{3}|[A-Z]\d{1,3}\s?[A-Z]{3}|[A-Z]{3}\s?\d{1,3}[A-Z]|[A-Z]{2}\d{2}\s?\d{3}"
)
VIN = r"[A-HJ-NPR-Z0-9]{17}"


class RowRuleError(ValueError):
    """Raised by a record builder for rules spanning several columns."""


@dataclass(frozen=True)
class ImportLayout:
    name: str
    columns: tuple[ColumnSpec, ...]
    reference_key: str  # field shown next to errors
    reference_header: str  # error report column title
    template_basename: str
    template_sheet_name: str
    export_sheet_name: str
    build: Callable[[dict[str, Any], str], Any]

    def column(self, key: str) -> ColumnSpec:
        for c in self.columns:
            if c.key == key:
                return c
        raise KeyError(key)

    def index_of(self, key: str) -> int:
        return self.columns.index(self.column(key))

    @property
    def error_report_filename(self) -> str:
        return f"{self.name.rstrip('s')}_upload_errors.xlsx"


BOOKING_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Booking Confirmation Date", "booking_confirmation_date", ColumnKind.DATE, required=True, width=20),
    ColumnSpec("Supplier", "supplier"),
    ColumnSpec("Reference", "supplier_reference", width=12),
    ColumnSpec("Coastr Reference", "booking_reference", required=True),
    ColumnSpec("SAGE INV", "invoice_reference"),
    ColumnSpec("Notes", "notes"),
    ColumnSpec("Customer Name", "customer_name", required=True, width=20),
    ColumnSpec("Phone Number", "phone_number"),
    ColumnSpec("Group", "vehicle_group", width=12),
    ColumnSpec("Registration", "registration", required=True, width=12, upper=True),
    ColumnSpec("Make & Model", "make_model", width=18),
    ColumnSpec("Pick Up Date", "pick_up_date", ColumnKind.DATE, required=True),
    ColumnSpec("Pick Up Time", "pick_up_time", ColumnKind.TIME, width=12),
    ColumnSpec("Pick Up Location", "pick_up_location", required=True, width=20),
    ColumnSpec("Drop Off Date", "drop_off_date", ColumnKind.DATE, required=True),
    ColumnSpec("Drop Off Time", "drop_off_time", ColumnKind.TIME, width=12),
    ColumnSpec("Drop Off Location", "drop_off_location", required=True, width=20),
    ColumnSpec("No of Days", "no_of_days", ColumnKind.INTEGER, width=12),
    ColumnSpec("Hire Charge incl Vat", "hire_charge_incl_vat", ColumnKind.CURRENCY, width=18),
    ColumnSpec("Insurance", "insurance", ColumnKind.CURRENCY, width=12),
    ColumnSpec("Additional Income", "additional_income", ColumnKind.CURRENCY),
    ColumnSpec("Additional Income Reason", "additional_income_reason", width=25),
    ColumnSpec("Extras", "extras", ColumnKind.CURRENCY, width=10),
    ColumnSpec("Extras Type", "extras_type"),
    ColumnSpec("Deposit TO BE Collected @ Branch", "deposit_to_be_collected", ColumnKind.CURRENCY, width=25),
    ColumnSpec("Charges Income", "charges_income", ColumnKind.CURRENCY),
    ColumnSpec("Paid To Us", "paid_to_us", ColumnKind.CURRENCY, width=12),
    ColumnSpec("Deposit", "deposit", ColumnKind.CURRENCY, width=10),
    ColumnSpec("Returned Date", "returned", ColumnKind.RETURNED),
    ColumnSpec("Comments", "comments", width=20),
)

VEHICLE_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Registration", "registration", required=True, upper=True, pattern=UK_REGISTRATION),
    ColumnSpec("VIN Number", "vin_number", width=20, upper=True, pattern=VIN),
    ColumnSpec("Make", "make", required=True),
    ColumnSpec("Model", "model", required=True),
    ColumnSpec("Colour", "colour", width=12),
    ColumnSpec("Size", "size", ColumnKind.ENUM, width=10, choices=VEHICLE_SIZES),
    ColumnSpec("MOT Expiry (DD/MM/YYYY)", "mot_expiry", ColumnKind.DATE, width=20),
    ColumnSpec("Tax Expiry (DD/MM/YYYY)", "tax_expiry", ColumnKind.DATE, width=20),
    ColumnSpec("Comments", "comments", width=30),
)


def _split_make_model(make_model: str) -> tuple[str, str]:
    # 先頭の単語をメーカー、残りをモデルとする ("BMW 3 Series" -> BMW / 3 Series)
    parts = make_model.split(" ", 1)
    if len(parts) == 2:
        return parts[0], parts[1].strip()
    return make_model, ""


def build_booking(values: dict[str, Any], actor: str) -> ParsedBooking:
    if values["drop_off_date"] < values["pick_up_date"]:
        raise RowRuleError("Drop off date cannot be before pick up date")
    make, model = _split_make_model(values["make_model"])
    deposit_due: Decimal = values["deposit_to_be_collected"]
    return ParsedBooking(
        **values,
        make=make,
        model=model,
        deposit_status="Yes" if deposit_due > 0 else None,
        created_by=actor,
        last_modified_by=actor,
    )


def build_vehicle(values: dict[str, Any], actor: str) -> ParsedVehicle:
    return ParsedVehicle(**values, created_by=actor, last_modified_by=actor)


BOOKING_LAYOUT = ImportLayout(
    name="bookings",
    columns=BOOKING_COLUMNS,
    reference_key="booking_reference",
    reference_header="Booking Reference",
    template_basename="booking_template",
    template_sheet_name="Booking Template",
    export_sheet_name="Bookings",
    build=build_booking,
)

VEHICLE_LAYOUT = ImportLayout(
    name="vehicles",
    columns=VEHICLE_COLUMNS,
    reference_key="registration",
    reference_header="Registration",
    template_basename="vehicle_template",
    template_sheet_name="Vehicle Template",
    export_sheet_name="Vehicles",
    build=build_vehicle,
)

LAYOUTS: dict[str, ImportLayout] = {
    BOOKING_LAYOUT.name: BOOKING_LAYOUT,
    VEHICLE_LAYOUT.name: VEHICLE_LAYOUT,
}


def get_layout(name: str) -> ImportLayout:
    try:
        return LAYOUTS[name]
    except KeyError:
        raise KeyError(f"unknown layout '{name}' (expected one of {sorted(LAYOUTS)})") from None
