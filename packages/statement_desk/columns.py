"""Column registry and field accessors for the statements table.

``STATEMENT_COLUMNS`` is the default header configuration shown by the
terminal viewer. ``FIELD_ACCESSORS`` is a closed table mapping every
:class:`~statement_desk.models.Statement` attribute to an extraction
function; filtering, sorting and rendering only read record fields through it,
so an unknown key is caught once when a table is configured instead of at
render time.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from operator import attrgetter
from types import MappingProxyType

from .models import ColumnDescriptor, FieldValue, Statement


class TableConfigError(ValueError):
    """Raised when a table is configured with an unknown or invalid field."""


type FieldAccessor = Callable[[Statement], FieldValue]

FIELD_ACCESSORS: Mapping[str, FieldAccessor] = MappingProxyType(
    {name: attrgetter(name) for name in Statement.model_fields}
)


STATEMENT_COLUMNS: tuple[ColumnDescriptor, ...] = (
    ColumnDescriptor("Statement ID", "statement_id", sortable=True),
    ColumnDescriptor("Account Number", "account_number"),
    ColumnDescriptor("Customer Name", "customer_name"),
    ColumnDescriptor("Billing Address", "billing_address"),
    ColumnDescriptor("Billing Start Date", "billing_start_date", sortable=True),
    ColumnDescriptor("Billing End Date", "billing_end_date", sortable=True),
    ColumnDescriptor("Due Date", "due_date", sortable=True),
    ColumnDescriptor("Total Amount Due", "total_amount_due", sortable=True),
    ColumnDescriptor("Previous Balance", "previous_balance", sortable=True),
    ColumnDescriptor("Payments Received", "payments_received", sortable=True),
    ColumnDescriptor("Energy Charge", "energy_charge", sortable=True),
    ColumnDescriptor("Delivery Charge", "delivery_charger", sortable=True),
    ColumnDescriptor("Taxes & Fees", "taxes_fees", sortable=True),
    ColumnDescriptor("Meter Number", "meter_number"),
    ColumnDescriptor("Usage Unit", "usage_unit"),
    ColumnDescriptor("Usage Total", "usage_total", sortable=True),
    ColumnDescriptor("Usage Peak", "usage_peak", sortable=True),
    ColumnDescriptor("Usage Off-Peak", "usage_off_peak", sortable=True),
    ColumnDescriptor("Rate Per Unit", "rate_per_unit", sortable=True),
    ColumnDescriptor("Service Address", "service_address"),
    ColumnDescriptor("Service Type", "service_type"),
    ColumnDescriptor("Provider Name", "provider_name"),
)

DEFAULT_FILTER_FIELD = "customer_name"


def field_accessor(field: str) -> FieldAccessor:
    """Return the accessor for ``field`` or raise :class:`TableConfigError`."""

    try:
        return FIELD_ACCESSORS[field]
    except KeyError:
        raise _unknown_field(field) from None


def _unknown_field(field: str) -> TableConfigError:
    known = ", ".join(sorted(FIELD_ACCESSORS))
    return TableConfigError(f"Unknown statement field {field!r}; expected one of: {known}")


_WIRE_KEYS: Mapping[str, str] = MappingProxyType(
    {info.alias: name for name, info in Statement.model_fields.items() if info.alias}
)


def resolve_field(name: str) -> str:
    """Map an attribute name or a camelCase wire key to the attribute name.

    Lets configuration and CLI options accept either ``customer_name`` or
    ``customerName``.
    """

    if name in FIELD_ACCESSORS:
        return name
    if name in _WIRE_KEYS:
        return _WIRE_KEYS[name]
    raise _unknown_field(name)


def validate_columns(columns: Iterable[ColumnDescriptor]) -> tuple[ColumnDescriptor, ...]:
    """Return ``columns`` as a tuple after checking every field key.

    Rules
    -----
    - At least one column is required.
    - Each ``field`` must name a :class:`Statement` attribute.
    - A field may appear only once (column identity is its field key).
    """

    cols = tuple(columns)
    if not cols:
        raise TableConfigError("A table needs at least one column")
    seen: set[str] = set()
    for col in cols:
        field_accessor(col.field)
        if col.field in seen:
            raise TableConfigError(f"Duplicate column for field {col.field!r}")
        seen.add(col.field)
    return cols


def find_column(columns: Sequence[ColumnDescriptor], field: str) -> ColumnDescriptor | None:
    for col in columns:
        if col.field == field:
            return col
    return None


__all__ = [
    "DEFAULT_FILTER_FIELD",
    "FIELD_ACCESSORS",
    "STATEMENT_COLUMNS",
    "TableConfigError",
    "field_accessor",
    "find_column",
    "resolve_field",
    "validate_columns",
]
