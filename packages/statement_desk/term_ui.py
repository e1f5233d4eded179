"""Interactive terminal session for the statements table (prompt_toolkit).

Command parsing (:func:`parse_command`) and application
(:func:`apply_command`) are plain functions over a
:class:`~statement_desk.table.PaginatedTable`, kept separate from the prompt
loop so they can be tested without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from rich.console import Console
from rich.text import Text

from .columns import TableConfigError, resolve_field
from .models import Ascending, Descending
from .render import page_info, render_table, render_view
from .shell import Failed, Ready, StatementsView
from .table import PaginatedTable

type Action = Literal["search", "sort", "next", "prev", "page", "move", "help", "quit"]


class CommandError(ValueError):
    """Raised for input that is not a valid table command."""


@dataclass(frozen=True, slots=True)
class Command:
    action: Action
    text: str = ""
    numbers: tuple[int, ...] = ()


HELP_TEXT = """\
Commands:
  /TEXT           search (a bare / clears the search)
  sort COL        sort by column number or field; repeat to flip, third time clears
  next | n        next page (Enter on an empty line does the same)
  prev | p        previous page
  page N          jump to page N
  move FROM TO    move the column at position FROM to position TO
  help | ?        show this help
  quit | q        leave"""

_ALIASES: dict[str, Action] = {
    "sort": "sort",
    "s": "sort",
    "next": "next",
    "n": "next",
    "prev": "prev",
    "previous": "prev",
    "p": "prev",
    "page": "page",
    "g": "page",
    "move": "move",
    "m": "move",
    "help": "help",
    "?": "help",
    "h": "help",
    "quit": "quit",
    "exit": "quit",
    "q": "quit",
}


def _ints(args: list[str], count: int, usage: str) -> tuple[int, ...]:
    if len(args) != count:
        raise CommandError(f"Usage: {usage}")
    try:
        return tuple(int(a) for a in args)
    except ValueError:
        raise CommandError(f"Usage: {usage}") from None


def parse_command(line: str) -> Command:
    """Turn one input line into a :class:`Command` or raise :class:`CommandError`."""

    s = line.strip()
    if not s:
        return Command("next")
    if s.startswith("/"):
        # The term is everything after the slash, spaces included.
        return Command("search", text=line.lstrip()[1:].rstrip("\r\n"))

    word, *args = s.split()
    action = _ALIASES.get(word.lower())
    if action is None:
        raise CommandError(f"Unknown command {word!r}; type 'help' for the list")

    if action == "sort":
        if not args:
            raise CommandError("Usage: sort COL")
        return Command("sort", text=" ".join(args))
    if action == "page":
        return Command("page", numbers=_ints(args, 1, "page N"))
    if action == "move":
        return Command("move", numbers=_ints(args, 2, "move FROM TO"))
    if args:
        raise CommandError(f"'{word}' takes no arguments")
    return Command(action)


def _resolve_sort_target(table: PaginatedTable, target: str) -> str | None:
    """Map a 1-based header position, label or field name to a field key."""

    if target.isdigit():
        pos = int(target)
        order = table.column_order
        if 1 <= pos <= len(order):
            return order[pos - 1].field
        return None
    for col in table.columns:
        if col.label.lower() == target.lower():
            return col.field
    try:
        return resolve_field(target)
    except TableConfigError:
        return None


def apply_command(table: PaginatedTable, cmd: Command) -> str:
    """Apply ``cmd`` to ``table`` and return a one-line status message."""

    if cmd.action == "search":
        if table.filter_field is None:
            return "Search is not available for this table."
        table.set_search_term(cmd.text)
        if not cmd.text:
            return "Search cleared."
        return f"{table.filtered_count} statement(s) match {cmd.text!r}."

    if cmd.action == "sort":
        field = _resolve_sort_target(table, cmd.text)
        if field is None:
            return f"No column {cmd.text!r}."
        if not table.toggle_sort(field):
            return f"Column {field!r} is not sortable."
        sort = table.sort
        if isinstance(sort, Ascending):
            return f"Sorted by {field} ascending."
        if isinstance(sort, Descending):
            return f"Sorted by {field} descending."
        return "Sort cleared."

    if cmd.action in ("next", "prev", "page"):
        if cmd.action == "next":
            target = table.current_page + 1
        elif cmd.action == "prev":
            target = table.current_page - 1
        else:
            target = cmd.numbers[0]
        if table.change_page(target):
            return page_info(table) + "."
        return f"Page {target} is out of range; staying on {page_info(table).lower()}."

    if cmd.action == "move":
        src, dst = cmd.numbers
        if table.reorder_columns(src - 1, dst - 1):
            return f"Moved column {src} to position {dst}."
        return f"Cannot move column {src} to {dst}: positions are 1..{len(table.column_order)}."

    raise CommandError(f"'{cmd.action}' is handled by the session loop")


def run_session(
    view: StatementsView,
    *,
    console: Console | None = None,
    session: PromptSession | None = None,
    message: str = "statements> ",
) -> int:
    """Load the view, then read commands until ``quit`` or end of input.

    Returns a process exit code: ``1`` when the fetch failed, else ``0``.
    """

    out = console or Console()
    state = view.load()
    out.print(render_view(state))
    if isinstance(state, Failed):
        return 1
    if not isinstance(state, Ready):
        return 0
    table = state.table

    words = sorted(set(_ALIASES)) + [col.field for col in table.columns]
    completer = WordCompleter(words, ignore_case=True, sentence=False)

    if session is None:
        sess: PromptSession = PromptSession()
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
        )

    out.print(Text("Type 'help' for commands.", style="dim"))
    while True:
        try:
            line = sess.prompt(message, completer=completer)
        except (EOFError, KeyboardInterrupt):
            break
        try:
            cmd = parse_command(line)
        except CommandError as e:
            out.print(Text(str(e), style="yellow"))
            continue
        if cmd.action == "quit":
            break
        if cmd.action == "help":
            out.print(Text(HELP_TEXT))
            continue
        status = apply_command(table, cmd)
        out.print(render_table(table))
        out.print(Text(status, style="cyan"))
    return 0


__all__ = [
    "Command",
    "CommandError",
    "HELP_TEXT",
    "apply_command",
    "parse_command",
    "run_session",
]
