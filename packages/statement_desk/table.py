"""Paginated table engine over an in-memory set of statements.

A :class:`PaginatedTable` owns the view state of one rendered table (search
term, sort state, current page, column order) and derives the visible rows
with a fixed pipeline:

1. filter: case-insensitive substring match on the configured filter field;
2. sort: stable, by one field, comparing numbers numerically, date text by
   date-time and anything else as case-folded, locale-collated text;
3. paginate: a ``page_size`` window for the current page.

All mutations are synchronous and re-derive immediately. Requests that do not
apply (out-of-range page, bad reorder index, non-sortable column) are no-ops
and report ``False``; configuration mistakes raise :class:`TableConfigError`
from the constructor.
"""

from __future__ import annotations

import locale
import math
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from functools import cmp_to_key

from .columns import TableConfigError, field_accessor, find_column, validate_columns
from .logging_setup import get_logger
from .models import (
    UNSORTED,
    Ascending,
    ColumnDescriptor,
    Descending,
    FieldValue,
    SortState,
    Statement,
)

_logger = get_logger("statement_desk.table")

# Non-ISO layouts accepted as date text, tried after ``fromisoformat``.
_DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
)


# ----------------------------------------------------------------------------
# Value helpers
# ----------------------------------------------------------------------------


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_text(value: FieldValue) -> str:
    """Text form of a raw cell value; absent values read as empty text."""

    if value is None:
        return ""
    return str(value)


def parse_date_text(value: str) -> datetime | None:
    """Parse calendar-date text, returning ``None`` when it is not a date.

    Timezone-aware values are normalized to naive UTC so that every parsed
    value is comparable with every other.
    """

    s = value.strip()
    if not s:
        return None
    parsed: datetime | None
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        parsed = None
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(s, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def compare_values(a: FieldValue, b: FieldValue) -> int:
    """Three-way comparison used for ascending order.

    - both numeric: numeric comparison;
    - both strings that parse as dates: date-time comparison;
    - otherwise: case-folded text compared with ``locale.strcoll``.
    """

    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)  # type: ignore[operator]
    if isinstance(a, str) and isinstance(b, str):
        da = parse_date_text(a)
        db = parse_date_text(b)
        if da is not None and db is not None:
            return (da > db) - (da < db)
    return locale.strcoll(as_text(a).casefold(), as_text(b).casefold())


def filter_records(
    records: Iterable[Statement], field: str | None, term: str
) -> list[Statement]:
    """Keep records whose ``field`` text contains ``term`` (case-insensitive)."""

    if field is None or term == "":
        return list(records)
    get = field_accessor(field)
    needle = term.lower()
    return [r for r in records if needle in as_text(get(r)).lower()]


def sort_records(records: Iterable[Statement], state: SortState) -> list[Statement]:
    """Return ``records`` ordered by ``state``; ties keep their input order."""

    if isinstance(state, Ascending):
        sign = 1
    elif isinstance(state, Descending):
        sign = -1
    else:
        return list(records)
    get = field_accessor(state.field)

    def _cmp(x: Statement, y: Statement) -> int:
        return sign * compare_values(get(x), get(y))

    # ``sorted`` is stable, so equal keys preserve filtered order in both directions.
    return sorted(records, key=cmp_to_key(_cmp))


# ----------------------------------------------------------------------------
# Table engine
# ----------------------------------------------------------------------------


class PaginatedTable:
    """View state and derived rows for one statements table.

    Parameters
    ----------
    records:
        The full record set, held read-only for the table's lifetime.
    columns:
        Column descriptors in configuration order.
    page_size:
        Rows per page; fixed for the lifetime of the instance.
    filter_field:
        Optional :class:`Statement` attribute searched by
        :meth:`set_search_term`. Without one, the search term is ignored.
    """

    def __init__(
        self,
        records: Iterable[Statement],
        columns: Iterable[ColumnDescriptor],
        page_size: int,
        filter_field: str | None = None,
    ) -> None:
        cols = validate_columns(columns)
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise TableConfigError(f"page_size must be a positive integer, got {page_size!r}")
        if filter_field is not None:
            field_accessor(filter_field)

        self._records: tuple[Statement, ...] = tuple(records)
        self._columns = cols
        self._column_order: list[ColumnDescriptor] = list(cols)
        self._page_size = page_size
        self._filter_field = filter_field

        self._search_term = ""
        self._sort: SortState = UNSORTED
        self._current_page = 1
        self._derived: tuple[Statement, ...] = ()
        self._derive()

    # ---- read access -------------------------------------------------------

    @property
    def records(self) -> tuple[Statement, ...]:
        return self._records

    @property
    def columns(self) -> tuple[ColumnDescriptor, ...]:
        """Columns in configuration order."""
        return self._columns

    @property
    def column_order(self) -> tuple[ColumnDescriptor, ...]:
        """Columns in current display order."""
        return tuple(self._column_order)

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def filter_field(self) -> str | None:
        return self._filter_field

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def sort(self) -> SortState:
        return self._sort

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def filtered_count(self) -> int:
        return len(self._derived)

    @property
    def total_pages(self) -> int:
        """``ceil(filtered_count / page_size)``; zero when nothing matches."""
        return math.ceil(len(self._derived) / self._page_size)

    @property
    def visible_records(self) -> list[Statement]:
        start = (self._current_page - 1) * self._page_size
        return list(self._derived[start : start + self._page_size])

    @property
    def visible_rows(self) -> list[tuple[FieldValue, ...]]:
        """Raw cell values of the current page, one tuple per row in column order."""

        getters: list[Callable[[Statement], FieldValue]] = [
            field_accessor(col.field) for col in self._column_order
        ]
        return [tuple(get(rec) for get in getters) for rec in self.visible_records]

    # ---- mutations ---------------------------------------------------------

    def set_search_term(self, term: str) -> None:
        """Replace the search term and return to the first page."""

        self._search_term = term
        self._current_page = 1
        self._derive()

    def toggle_sort(self, field: str) -> bool:
        """Advance the sort state for ``field``.

        Cycle per column: unsorted or another column → ascending →
        descending → unsorted. Returns ``False`` (and changes nothing) when
        ``field`` is not a sortable column of this table.
        """

        col = find_column(self._columns, field)
        if col is None or not col.sortable:
            _logger.debug("ignoring sort request for non-sortable field %r", field)
            return False

        current = self._sort
        if isinstance(current, Ascending) and current.field == field:
            self._sort = Descending(field)
        elif isinstance(current, Descending) and current.field == field:
            self._sort = UNSORTED
        else:
            self._sort = Ascending(field)
        self._derive()
        return True

    def set_sort(self, state: SortState) -> bool:
        """Apply ``state`` directly; rejected for non-sortable columns."""

        if not isinstance(state, (Ascending, Descending)):
            self._sort = UNSORTED
            self._derive()
            return True
        col = find_column(self._columns, state.field)
        if col is None or not col.sortable:
            _logger.debug("ignoring sort state for non-sortable field %r", state.field)
            return False
        self._sort = state
        self._derive()
        return True

    def reorder_columns(self, source: int, target: int) -> bool:
        """Move the column at ``source`` to ``target`` in the current order.

        Both indices are zero-based positions in :attr:`column_order`.
        Out-of-range indices leave the order untouched and return ``False``.
        """

        n = len(self._column_order)
        if not (0 <= source < n and 0 <= target < n):
            _logger.debug("rejecting column move %s -> %s (have %d columns)", source, target, n)
            return False
        moved = self._column_order.pop(source)
        self._column_order.insert(target, moved)
        return True

    def change_page(self, page: int) -> bool:
        """Go to ``page`` when it lies in ``[1, total_pages]``; otherwise no-op."""

        if 1 <= page <= self.total_pages:
            self._current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.change_page(self._current_page + 1)

    def previous_page(self) -> bool:
        return self.change_page(self._current_page - 1)

    # ---- internals ---------------------------------------------------------

    def _derive(self) -> None:
        filtered = filter_records(self._records, self._filter_field, self._search_term)
        self._derived = tuple(sort_records(filtered, self._sort))
        # Keep the page inside [1, max(1, total_pages)].
        self._current_page = min(max(1, self._current_page), max(1, self.total_pages))


__all__ = [
    "PaginatedTable",
    "TableConfigError",
    "as_text",
    "compare_values",
    "filter_records",
    "parse_date_text",
    "sort_records",
]
