"""Record source: load or generate the statements served by the backend.

Two file layouts are accepted, both keyed by the camelCase wire names used by
``GET /statements``:

- JSON: a top-level array of statement objects;
- CSV: a header row of wire names (``statementID``, ``customerName``...) with
  one statement per row. Blank cells are treated as absent values.

Without a data file the server falls back to
:func:`generate_sample_statements`, a seeded generator that yields a stable
set of plausible utility bills.
"""

from __future__ import annotations

import csv
import json
import random
import re
from collections.abc import Iterable, Iterator, Mapping
from datetime import date, timedelta
from os import PathLike
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .logging_setup import get_logger
from .models import Statement

_logger = get_logger("statement_desk.source")

_STATEMENT_LIST = TypeAdapter(list[Statement])


class RecordSourceError(RuntimeError):
    """Raised when statements cannot be loaded, fetched or decoded."""


# ----------------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------------


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    # Collapse internal whitespace (including newlines) and strip.
    cleaned = re.sub(r"\s+", " ", value).strip()
    return cleaned if cleaned != "" else None


def parse_statements(payload: Any) -> list[Statement]:
    """Validate a decoded JSON payload (an array of objects) into statements."""

    if not isinstance(payload, list):
        raise RecordSourceError(
            f"Expected a JSON array of statements, got {type(payload).__name__}"
        )
    try:
        return _STATEMENT_LIST.validate_python(payload)
    except ValidationError as e:
        raise RecordSourceError(f"Invalid statement payload: {e.error_count()} error(s): {e}") from e


def rows_to_payload(rows: Iterable[Mapping[str, str | None]]) -> Iterator[dict[str, Any]]:
    """Convert CSV rows keyed by wire names into JSON-like statement dicts.

    Blank cells are dropped so model defaults apply; text cells are trimmed
    and whitespace-collapsed.
    """

    for row in rows:
        item: dict[str, Any] = {}
        for key, raw in row.items():
            if key is None:
                continue
            value = _clean_text(raw)
            if value is None:
                continue
            item[key.strip()] = value
        yield item


def load_statements(path: str | PathLike[str]) -> list[Statement]:
    """Read statements from a ``.json`` or ``.csv`` file.

    Raises :class:`RecordSourceError` for unreadable files, unknown
    extensions, a CSV without the ``statementID`` header, or records that do
    not validate.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    try:
        if suffix == ".json":
            with p.open(encoding="utf-8") as f:
                payload = json.load(f)
            statements = parse_statements(payload)
        elif suffix == ".csv":
            with p.open(encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f)
                headers = set(reader.fieldnames or [])
                if not headers:
                    raise RecordSourceError(f"CSV appears to have no header row: {p}")
                if "statementID" not in headers:
                    raise RecordSourceError(
                        "CSV header mismatch: missing 'statementID' column "
                        f"(headers: {', '.join(sorted(headers))})"
                    )
                statements = parse_statements(list(rows_to_payload(reader)))
        else:
            raise RecordSourceError(f"Unsupported data file type {suffix or '<none>'!r}: {p}")
    except OSError as e:
        raise RecordSourceError(f"Cannot read data file {p}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError, csv.Error) as e:
        raise RecordSourceError(f"Failed to parse data file {p}: {e}") from e

    _logger.info("loaded %d statements from %s", len(statements), p)
    return statements


def dump_statements(statements: Iterable[Statement], path: str | PathLike[str]) -> Path:
    """Write ``statements`` as a JSON array using wire names; returns the path."""

    p = Path(path)
    payload = [s.model_dump(by_alias=True) for s in statements]
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    tmp.replace(p)
    return p


# ----------------------------------------------------------------------------
# Sample data
# ----------------------------------------------------------------------------

_CUSTOMERS = (
    "Ana Torres",
    "Brian O'Neill",
    "Chen Wei",
    "Dana Whitfield",
    "Elena Petrova",
    "Farid Haddad",
    "Grace Kim",
    "Hector Alvarez",
    "Isabel Duarte",
    "Jonas Becker",
    "Keiko Tanaka",
    "Luis Romero",
)
_STREETS = ("Maple Ave", "Oak St", "Pine Rd", "Cedar Ln", "Elm Blvd", "Birch Way")
_CITIES = ("Springfield, IL", "Riverside, CA", "Franklin, TN", "Greenville, SC")
_PROVIDERS = ("Northwind Energy", "Bright Grid Utilities", "Contoso Power")
_SERVICE_TYPES = ("Residential", "Commercial")


def generate_sample_statements(count: int = 25, *, seed: int = 7) -> list[Statement]:
    """Return ``count`` deterministic sample statements.

    Billing periods are consecutive 30-day windows starting 2024-01-01; usage
    splits into peak/off-peak and charges are derived from usage and rate so
    the amounts are internally consistent.
    """

    if count < 0:
        raise ValueError("count must be non-negative")

    rng = random.Random(seed)
    out: list[Statement] = []
    for i in range(count):
        customer = _CUSTOMERS[i % len(_CUSTOMERS)]
        street_no = rng.randint(10, 9999)
        address = f"{street_no} {rng.choice(_STREETS)}, {rng.choice(_CITIES)}"
        start = date(2024, 1, 1) + timedelta(days=30 * (i // len(_CUSTOMERS)) + rng.randint(0, 9))
        end = start + timedelta(days=30)
        due = end + timedelta(days=15)

        usage_total = rng.randint(250, 1800)
        usage_peak = rng.randint(usage_total // 4, usage_total // 2)
        rate = round(rng.uniform(0.09, 0.21), 4)
        energy = round(usage_total * rate, 2)
        delivery = round(usage_total * 0.035, 2)
        taxes = round((energy + delivery) * 0.08, 2)
        previous = round(rng.uniform(0, 250), 2)
        paid = round(rng.uniform(0, previous), 2)
        total_due = round(previous - paid + energy + delivery + taxes, 2)
        service_type = _SERVICE_TYPES[1] if i % 5 == 4 else _SERVICE_TYPES[0]

        out.append(
            Statement(
                statement_id=1000 + i,
                account_number=f"AC-{rng.randint(100000, 999999)}",
                customer_name=customer,
                billing_address=address,
                billing_start_date=start.isoformat(),
                billing_end_date=end.isoformat(),
                due_date=due.isoformat(),
                total_amount_due=total_due,
                previous_balance=previous,
                payments_received=paid,
                energy_charge=energy,
                delivery_charger=delivery,
                taxes_fees=taxes,
                meter_number=f"MTR-{rng.randint(10000, 99999)}",
                usage_unit="kWh",
                usage_total=usage_total,
                usage_peak=usage_peak,
                usage_off_peak=usage_total - usage_peak,
                rate_per_unit=rate,
                service_address=address,
                service_type=service_type,
                provider_name=rng.choice(_PROVIDERS),
            )
        )
    return out


__all__ = [
    "RecordSourceError",
    "dump_statements",
    "generate_sample_statements",
    "load_statements",
    "parse_statements",
    "rows_to_payload",
]
