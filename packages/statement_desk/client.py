"""Thin client for the statement listing endpoint.

One non-streaming ``GET`` against ``STATEMENT_DESK_URL`` (or an explicit URL),
decoding the JSON array body into :class:`~statement_desk.models.Statement`
models. No retries and no caching: a failure is reported once as
:class:`~statement_desk.source.RecordSourceError` and the caller decides what
to show.
"""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request

from .logging_setup import get_logger
from .models import Statement
from .source import RecordSourceError, parse_statements

_logger = get_logger("statement_desk.client")


def fetch_statements(url: str, *, timeout: float | None = None) -> list[Statement]:
    """Fetch and decode the statement listing at ``url``.

    Parameters
    ----------
    url:
        Full URL of the listing endpoint (e.g.
        ``http://127.0.0.1:8000/statements``).
    timeout:
        Optional socket timeout in seconds; ``None`` blocks until the server
        answers.
    """

    _logger.info("fetching statements from %s", url)
    try:
        req = urllib.request.Request(url, method="GET")
        req.add_header("Accept", "application/json")
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise RecordSourceError(f"Statements request failed: {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        raise RecordSourceError(f"Cannot reach statements endpoint {url}: {e.reason}") from e
    except OSError as e:
        # Socket timeouts and resets surface as plain OSError subclasses.
        raise RecordSourceError(f"Statements request to {url} failed: {e}") from e
    except (ValueError, http.client.HTTPException) as e:
        # Malformed URLs (bad port, unknown scheme) and truncated bodies.
        raise RecordSourceError(f"Statements request to {url} failed: {e}") from e

    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordSourceError("Statements response is not valid JSON") from e

    statements = parse_statements(payload)
    _logger.info("received %d statements", len(statements))
    return statements


__all__ = ["fetch_statements"]
