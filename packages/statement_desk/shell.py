"""Presentation shell: fetch statements once and hold the screen state.

The screen is always in exactly one of four states:

- :class:`Loading`: the fetch has not completed yet;
- :class:`Failed`: the fetch failed (network, HTTP status or payload), with a
  message for the user;
- :class:`Empty`: the fetch succeeded but returned no statements;
- :class:`Ready`: a :class:`~statement_desk.table.PaginatedTable` over the
  records.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .columns import DEFAULT_FILTER_FIELD, STATEMENT_COLUMNS
from .logging_setup import get_logger
from .models import ColumnDescriptor, Statement
from .source import RecordSourceError
from .table import PaginatedTable

_logger = get_logger("statement_desk.shell")


@dataclass(frozen=True, slots=True)
class Loading:
    pass


@dataclass(frozen=True, slots=True)
class Failed:
    message: str


@dataclass(frozen=True, slots=True)
class Empty:
    pass


@dataclass(frozen=True, slots=True)
class Ready:
    table: PaginatedTable


type ViewState = Loading | Failed | Empty | Ready

LOADING = Loading()

type Fetcher = Callable[[], Sequence[Statement]]


class StatementsView:
    """Owns the single fetch and the table built from its result.

    The column/page/filter configuration is validated in the constructor by
    building an empty table, so a bad field key fails before any request is
    made.
    """

    def __init__(
        self,
        fetch: Fetcher,
        *,
        columns: Iterable[ColumnDescriptor] = STATEMENT_COLUMNS,
        page_size: int = 5,
        filter_field: str | None = DEFAULT_FILTER_FIELD,
    ) -> None:
        self._columns = tuple(columns)
        self._page_size = page_size
        self._filter_field = filter_field
        PaginatedTable((), self._columns, page_size, filter_field)
        self._fetch = fetch
        self._state: ViewState = LOADING

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def table(self) -> PaginatedTable | None:
        return self._state.table if isinstance(self._state, Ready) else None

    def load(self) -> ViewState:
        """Run the fetch on first call; later calls return the settled state."""

        if not isinstance(self._state, Loading):
            return self._state

        try:
            records = list(self._fetch())
        except RecordSourceError as e:
            _logger.warning("statement fetch failed: %s", e)
            self._state = Failed(str(e))
            return self._state

        if not records:
            self._state = Empty()
        else:
            self._state = Ready(
                PaginatedTable(records, self._columns, self._page_size, self._filter_field)
            )
        return self._state


__all__ = [
    "Empty",
    "Failed",
    "LOADING",
    "Loading",
    "Ready",
    "StatementsView",
    "ViewState",
]
