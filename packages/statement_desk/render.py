"""Rich renderables for the statements screen.

Cells are shown verbatim: numbers and date text appear exactly as received
(absent values as blank cells). Headers carry their 1-based display position
so terminal commands can refer to them, plus an arrow on the sorted column.
"""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Ascending, ColumnDescriptor, Descending, SortState
from .shell import Empty, Failed, Ready, ViewState
from .table import PaginatedTable, as_text

ASC_MARKER = " ▲"
DESC_MARKER = " ▼"

LOADING_MESSAGE = "Loading..."
EMPTY_MESSAGE = "No statements found."


def sort_marker(column: ColumnDescriptor, sort: SortState) -> str:
    if isinstance(sort, Ascending) and sort.field == column.field:
        return ASC_MARKER
    if isinstance(sort, Descending) and sort.field == column.field:
        return DESC_MARKER
    return ""


def header_text(position: int, column: ColumnDescriptor, sort: SortState) -> Text:
    return Text.assemble(
        (f"{position} ", "dim"),
        (column.label, "bold" if column.sortable else ""),
        sort_marker(column, sort),
    )


def page_info(table: PaginatedTable) -> str:
    return f"Page {table.current_page} of {table.total_pages}"


def render_table(table: PaginatedTable) -> RenderableType:
    """Search caption, the current page of rows, and the pagination footer."""

    parts: list[RenderableType] = []
    if table.filter_field is not None:
        term = table.search_term
        caption = f"Search by {table.filter_field}: "
        parts.append(Text.assemble(caption, (term, "bold") if term else ("(none)", "dim")))

    grid = Table(show_lines=False, header_style="")
    for position, column in enumerate(table.column_order, start=1):
        grid.add_column(header_text(position, column, table.sort), no_wrap=True)
    for row in table.visible_rows:
        grid.add_row(*(Text(as_text(value)) for value in row))
    parts.append(grid)

    if table.filtered_count == 0:
        parts.append(Text(f"No statements match {table.search_term!r}.", style="yellow"))

    parts.append(
        Text(f"{page_info(table)}  ({table.filtered_count} statements)", justify="center")
    )
    return Group(*parts)


def render_view(state: ViewState) -> RenderableType:
    if isinstance(state, Ready):
        return render_table(state.table)
    if isinstance(state, Failed):
        return Panel(
            Text(state.message),
            title="Could not load statements",
            border_style="red",
        )
    if isinstance(state, Empty):
        return Text(EMPTY_MESSAGE, style="italic")
    return Text(LOADING_MESSAGE, style="italic")


__all__ = [
    "ASC_MARKER",
    "DESC_MARKER",
    "EMPTY_MESSAGE",
    "LOADING_MESSAGE",
    "header_text",
    "page_info",
    "render_table",
    "render_view",
    "sort_marker",
]
