"""Runtime settings read from the environment.

The CLI loads a ``.env`` from the working directory (``python-dotenv``,
without overriding variables already set) before calling
:meth:`Settings.from_env`. Malformed numeric values fall back to defaults
with a warning rather than aborting startup.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .columns import DEFAULT_FILTER_FIELD
from .logging_setup import get_logger

_logger = get_logger("statement_desk.config")

DEFAULT_URL = "http://127.0.0.1:8000/statements"
DEFAULT_PAGE_SIZE = 5
DEFAULT_SAMPLE_SIZE = 25


def _env_positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
        if value <= 0:
            raise ValueError
    except ValueError:
        _logger.warning("ignoring %s=%r (expected a positive integer)", name, raw)
        return default
    return value


def _env_positive_float(env: Mapping[str, str], name: str) -> float | None:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
        if value <= 0:
            raise ValueError
    except ValueError:
        _logger.warning("ignoring %s=%r (expected a positive number of seconds)", name, raw)
        return None
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved configuration for the server and the terminal viewer.

    Attributes
    ----------
    url:
        Listing endpoint fetched by the viewer (``STATEMENT_DESK_URL``).
    page_size:
        Rows per table page (``STATEMENT_DESK_PAGE_SIZE``).
    filter_field:
        Statement field searched by the viewer (``STATEMENT_DESK_FILTER_FIELD``);
        an empty value disables search.
    data_file:
        JSON/CSV file served by ``serve`` (``STATEMENT_DESK_DATA_FILE``); when
        unset the server generates sample statements.
    sample_size:
        Number of generated statements (``STATEMENT_DESK_SAMPLE_SIZE``).
    fetch_timeout:
        Optional socket timeout in seconds for the fetch
        (``STATEMENT_DESK_FETCH_TIMEOUT``); ``None`` waits indefinitely.
    """

    url: str = DEFAULT_URL
    page_size: int = DEFAULT_PAGE_SIZE
    filter_field: str | None = DEFAULT_FILTER_FIELD
    data_file: Path | None = None
    sample_size: int = DEFAULT_SAMPLE_SIZE
    fetch_timeout: float | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env

        filter_field: str | None = DEFAULT_FILTER_FIELD
        raw_filter = env.get("STATEMENT_DESK_FILTER_FIELD")
        if raw_filter is not None:
            filter_field = raw_filter.strip() or None

        raw_data = (env.get("STATEMENT_DESK_DATA_FILE") or "").strip()

        return cls(
            url=(env.get("STATEMENT_DESK_URL") or "").strip() or DEFAULT_URL,
            page_size=_env_positive_int(env, "STATEMENT_DESK_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            filter_field=filter_field,
            data_file=Path(raw_data).expanduser() if raw_data else None,
            sample_size=_env_positive_int(env, "STATEMENT_DESK_SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE),
            fetch_timeout=_env_positive_float(env, "STATEMENT_DESK_FETCH_TIMEOUT"),
        )
