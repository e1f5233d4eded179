"""CLI for the ``statement_desk`` package.

Callable command handlers (``cmd_serve``, ``cmd_show``...) return process exit
codes and are wrapped by a Typer console interface. Environment variables are
loaded from a local ``.env`` using ``python-dotenv`` before any command runs;
see :class:`statement_desk.config.Settings` for the recognized names.
"""

from __future__ import annotations

import locale
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .columns import STATEMENT_COLUMNS, TableConfigError, resolve_field
from .config import Settings
from .logging_setup import configure_logging, get_logger
from .models import Ascending, ColumnDescriptor, Descending, Statement

_logger = get_logger("statement_desk.cli")


# ---- Small module-level helpers used by CLI commands -------------------------


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _resolve_filter_field(raw: str | None, settings: Settings) -> str | None:
    """``None`` keeps the configured field; ``""``/``none`` disables search."""

    if raw is None:
        return resolve_field(settings.filter_field) if settings.filter_field else None
    value = raw.strip()
    if not value or value.lower() == "none":
        return None
    return resolve_field(value)


def _select_columns(raw: str | None) -> tuple[ColumnDescriptor, ...]:
    """Pick registry columns by comma-separated field names, in the given order."""

    if raw is None or not raw.strip():
        return STATEMENT_COLUMNS
    by_field = {col.field: col for col in STATEMENT_COLUMNS}
    selected: list[ColumnDescriptor] = []
    for part in raw.split(","):
        if not part.strip():
            continue
        field = resolve_field(part.strip())
        if field not in by_field:
            raise TableConfigError(f"Field {field!r} has no column in the registry")
        selected.append(by_field[field])
    return tuple(selected)


def _make_fetcher(
    settings: Settings, *, url: str | None, data_file: Path | None
) -> Callable[[], Sequence[Statement]]:
    """Return the one-shot record fetch for the viewer commands.

    A local ``data_file`` wins over the listing URL so the table can be used
    without a running server.
    """

    if data_file is not None:
        from .source import load_statements

        return lambda: load_statements(data_file)

    from .client import fetch_statements

    target = url or settings.url
    return lambda: fetch_statements(target, timeout=settings.fetch_timeout)


def _load_served_statements(
    settings: Settings, data_file: Path | None, sample_size: int | None
) -> list[Statement]:
    from .source import generate_sample_statements, load_statements

    path = data_file or settings.data_file
    if path is not None:
        return load_statements(path)
    count = sample_size or settings.sample_size
    _logger.info("no data file configured; generating %d sample statements", count)
    return generate_sample_statements(count)


# ---- Command handlers ----------------------------------------------------------


def cmd_serve(
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    data_file: Path | None = None,
    sample_size: int | None = None,
) -> int:
    """Serve ``GET /statements`` with uvicorn until interrupted."""

    import uvicorn

    from .server import create_app
    from .source import RecordSourceError

    settings = Settings.from_env()
    try:
        statements = _load_served_statements(settings, data_file, sample_size)
    except RecordSourceError as e:
        return _error(str(e))

    uvicorn.run(create_app(statements), host=host, port=port)
    return 0


def cmd_generate_sample(output: Path, *, count: int = 25, seed: int = 7) -> int:
    """Write ``count`` generated statements to ``output`` as a JSON array."""

    from .source import dump_statements, generate_sample_statements

    if count < 0:
        return _error("--count must be non-negative")
    try:
        path = dump_statements(generate_sample_statements(count, seed=seed), output)
    except OSError as e:
        return _error(f"Cannot write {output}: {e}")
    print(f"Wrote {count} statements to {path}")
    return 0


def cmd_show(
    *,
    url: str | None = None,
    data_file: Path | None = None,
    page_size: int | None = None,
    filter_field: str | None = None,
    columns: str | None = None,
    search: str | None = None,
    sort: str | None = None,
    descending: bool = False,
    page: int = 1,
) -> int:
    """Fetch once and print a single page of the table, non-interactively."""

    from rich.console import Console

    from .render import render_view
    from .shell import Failed, Ready, StatementsView

    settings = Settings.from_env()
    try:
        view = StatementsView(
            _make_fetcher(settings, url=url, data_file=data_file),
            columns=_select_columns(columns),
            page_size=page_size or settings.page_size,
            filter_field=_resolve_filter_field(filter_field, settings),
        )
        sort_field = resolve_field(sort) if sort else None
    except TableConfigError as e:
        return _error(str(e))

    console = Console()
    state = view.load()
    if isinstance(state, Ready):
        table = state.table
        if search:
            table.set_search_term(search)
        if sort_field is not None:
            requested = Descending(sort_field) if descending else Ascending(sort_field)
            if not table.set_sort(requested):
                return _error(f"Column {sort_field!r} is not sortable")
        if page != 1 and not table.change_page(page):
            print(
                f"Page {page} is out of range (1..{table.total_pages}); showing page "
                f"{table.current_page}.",
                file=sys.stderr,
            )
    console.print(render_view(state))
    return 1 if isinstance(state, Failed) else 0


def cmd_view(
    *,
    url: str | None = None,
    data_file: Path | None = None,
    page_size: int | None = None,
    filter_field: str | None = None,
    columns: str | None = None,
) -> int:
    """Fetch once and open the interactive table session."""

    from .shell import StatementsView
    from .term_ui import run_session

    settings = Settings.from_env()
    try:
        view = StatementsView(
            _make_fetcher(settings, url=url, data_file=data_file),
            columns=_select_columns(columns),
            page_size=page_size or settings.page_size,
            filter_field=_resolve_filter_field(filter_field, settings),
        )
    except TableConfigError as e:
        return _error(str(e))
    return run_session(view)


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Serve billing statements over HTTP and browse them in a paginated, "
        "searchable, sortable terminal table. Loads settings from a local .env."
    ),
)

UrlOpt = Annotated[
    str | None,
    typer.Option("--url", help="Listing endpoint (falls back to STATEMENT_DESK_URL)."),
]
DataFileOpt = Annotated[
    Path | None,
    typer.Option(
        "--data-file",
        help="Read statements from a local JSON/CSV file instead of the endpoint.",
        dir_okay=False,
    ),
]
PageSizeOpt = Annotated[
    int | None,
    typer.Option("--page-size", min=1, help="Rows per page (STATEMENT_DESK_PAGE_SIZE)."),
]
FilterFieldOpt = Annotated[
    str | None,
    typer.Option(
        "--filter-field",
        help="Field searched by '/' (STATEMENT_DESK_FILTER_FIELD); 'none' disables search.",
    ),
]
ColumnsOpt = Annotated[
    str | None,
    typer.Option("--columns", help="Comma-separated fields to display (default: all)."),
]


@app.command("serve")
def serve_cmd(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to bind.")] = 8000,
    data_file: DataFileOpt = None,
    sample_size: Annotated[
        int | None,
        typer.Option(min=1, help="Generated statements when no data file is configured."),
    ] = None,
) -> None:
    """Run the read-only statements API."""

    raise typer.Exit(
        cmd_serve(host=host, port=port, data_file=data_file, sample_size=sample_size)
    )


@app.command("generate-sample")
def generate_sample_cmd(
    output: Annotated[Path, typer.Argument(dir_okay=False, help="JSON file to write.")],
    count: Annotated[int, typer.Option(help="Number of statements.")] = 25,
    seed: Annotated[int, typer.Option(help="Random seed for reproducible data.")] = 7,
) -> None:
    """Write deterministic sample statements to a JSON file."""

    raise typer.Exit(cmd_generate_sample(output, count=count, seed=seed))


@app.command("show")
def show_cmd(
    url: UrlOpt = None,
    data_file: DataFileOpt = None,
    page_size: PageSizeOpt = None,
    filter_field: FilterFieldOpt = None,
    columns: ColumnsOpt = None,
    search: Annotated[str | None, typer.Option(help="Search term for the filter field.")] = None,
    sort: Annotated[str | None, typer.Option(help="Sortable field to order by.")] = None,
    descending: Annotated[bool, typer.Option(help="Sort descending.")] = False,
    page: Annotated[int, typer.Option(min=1, help="Page to print.")] = 1,
) -> None:
    """Print one page of the statements table and exit."""

    raise typer.Exit(
        cmd_show(
            url=url,
            data_file=data_file,
            page_size=page_size,
            filter_field=filter_field,
            columns=columns,
            search=search,
            sort=sort,
            descending=descending,
            page=page,
        )
    )


@app.command("view")
def view_cmd(
    url: UrlOpt = None,
    data_file: DataFileOpt = None,
    page_size: PageSizeOpt = None,
    filter_field: FilterFieldOpt = None,
    columns: ColumnsOpt = None,
) -> None:
    """Browse statements interactively."""

    raise typer.Exit(
        cmd_view(
            url=url,
            data_file=data_file,
            page_size=page_size,
            filter_field=filter_field,
            columns=columns,
        )
    )


@app.callback()
def _root() -> None:
    """Load ``.env`` (without overriding the environment) and set up logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    # Text sorting collates with the user's locale when one is configured.
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        _logger.debug("falling back to the C collation locale")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    app()
