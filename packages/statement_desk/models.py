"""Data models and type aliases for ``statement_desk``.

The listing endpoint speaks camelCase JSON (``statementID``,
``customerName``...). Python code works with snake_case attributes; every
field therefore carries an explicit alias that is used for both validation
and serialization.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Statement record
# ---------------------------------------------------------------------------


class Statement(BaseModel):
    """One billing statement as returned by ``GET /statements``.

    Textual fields may be absent (``None``). Numeric fields default to zero
    when the payload omits them. Instances are frozen; nothing in this
    package mutates a record after it has been received.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    statement_id: int = Field(0, alias="statementID")
    account_number: str | None = Field(None, alias="accountNumber")
    customer_name: str | None = Field(None, alias="customerName")
    billing_address: str | None = Field(None, alias="billingAddress")
    billing_start_date: str | None = Field(None, alias="billingStartDate")
    billing_end_date: str | None = Field(None, alias="billingEndDate")
    due_date: str | None = Field(None, alias="dueDate")
    total_amount_due: float = Field(0.0, alias="totalAmountDue")
    previous_balance: float = Field(0.0, alias="previousBalance")
    payments_received: float = Field(0.0, alias="paymentsReceived")
    energy_charge: float = Field(0.0, alias="energyCharge")
    # Wire name kept as published by the backend.
    delivery_charger: float = Field(0.0, alias="deliveryCharger")
    taxes_fees: float = Field(0.0, alias="taxesFees")
    meter_number: str | None = Field(None, alias="meterNumber")
    usage_unit: str | None = Field(None, alias="usageUnit")
    usage_total: int = Field(0, alias="usageTotal")
    usage_peak: int = Field(0, alias="usagePeak")
    usage_off_peak: int = Field(0, alias="usageOffPeak")
    rate_per_unit: float = Field(0.0, alias="ratePerUnit")
    service_address: str | None = Field(None, alias="serviceAddress")
    service_type: str | None = Field(None, alias="serviceType")
    provider_name: str | None = Field(None, alias="providerName")


# Raw cell value as read from a record field.
type FieldValue = int | float | str | None

type Statements = Sequence[Statement]


# ---------------------------------------------------------------------------
# Column descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """Static metadata for one table column.

    Attributes
    ----------
    label:
        Header text shown to the user.
    field:
        Attribute name on :class:`Statement` (e.g. ``"customer_name"``).
    sortable:
        Whether clicking/selecting the header may change the sort order.
    """

    label: str
    field: str
    sortable: bool = False


# ---------------------------------------------------------------------------
# Sort state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Unsorted:
    """Rows are shown in filtered input order."""


@dataclass(frozen=True, slots=True)
class Ascending:
    field: str


@dataclass(frozen=True, slots=True)
class Descending:
    field: str


type SortState = Unsorted | Ascending | Descending

UNSORTED = Unsorted()
