"""FastAPI application serving the statement listing.

``GET /statements`` returns every statement as a JSON array with camelCase
keys. There are no query parameters, no paging and no authentication; the
records are held in memory for the lifetime of the process.
"""

from __future__ import annotations

from collections.abc import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .logging_setup import get_logger
from .models import Statement

STATEMENTS_PATH = "/statements"

_logger = get_logger("statement_desk.server")


def create_app(statements: Iterable[Statement]) -> FastAPI:
    """Build the API over a fixed, read-only set of statements."""

    records: tuple[Statement, ...] = tuple(statements)

    app = FastAPI(
        title="Statements API",
        description="Read-only listing of billing statements",
        version="1.0.0",
    )

    # The viewer may be served from another origin during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, object]:
        return {"status": "healthy", "statements": len(records)}

    @app.get(STATEMENTS_PATH, response_model=list[Statement], tags=["Statements"])
    async def list_statements() -> list[Statement]:
        """Return all statements in source order."""
        _logger.debug("serving %d statements", len(records))
        return list(records)

    _logger.info("statements API ready with %d records", len(records))
    return app


__all__ = ["STATEMENTS_PATH", "create_app"]
