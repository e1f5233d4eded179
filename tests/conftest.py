"""Pytest configuration for test isolation.

Commands read ``STATEMENT_DESK_*`` variables and load a ``.env`` from the
working directory. A developer's own settings must not leak into tests, so an
autouse fixture clears those variables and moves each test into its own
temporary directory. Logging configuration is marked as done so CLI tests do
not bind a handler to the runner's short-lived streams.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is importable without an install.
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))

import statement_desk.logging_setup as logging_setup  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("STATEMENT_DESK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", True)
