import http.client
import io
import json
import urllib.error
import urllib.request

import pytest

from statement_desk.client import fetch_statements
from statement_desk.source import RecordSourceError

URL = "http://example.test/statements"


class _FakeResponse:
    def __init__(self, body: bytes):
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _serve(monkeypatch, body: bytes, seen: list | None = None):
    def fake_urlopen(req, timeout=None):
        if seen is not None:
            seen.append((req, timeout))
        return _FakeResponse(body)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)


def _fail(monkeypatch, exc: Exception):
    def fake_urlopen(req, timeout=None):
        raise exc

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)


def test_fetch_decodes_statements(monkeypatch):
    seen: list = []
    body = json.dumps([{"statementID": 1, "customerName": "Ana"}, {"statementID": 2}]).encode()
    _serve(monkeypatch, body, seen)

    records = fetch_statements(URL, timeout=2.5)
    assert [r.statement_id for r in records] == [1, 2]
    assert records[0].customer_name == "Ana"

    req, timeout = seen[0]
    assert req.full_url == URL
    assert req.get_method() == "GET"
    assert req.get_header("Accept") == "application/json"
    assert timeout == 2.5


def test_fetch_reports_http_errors(monkeypatch):
    err = urllib.error.HTTPError(URL, 503, "Service Unavailable", {}, io.BytesIO(b""))
    _fail(monkeypatch, err)
    with pytest.raises(RecordSourceError, match="503"):
        fetch_statements(URL)


def test_fetch_reports_unreachable_server(monkeypatch):
    _fail(monkeypatch, urllib.error.URLError("connection refused"))
    with pytest.raises(RecordSourceError, match="Cannot reach"):
        fetch_statements(URL)


def test_fetch_reports_timeouts(monkeypatch):
    _fail(monkeypatch, TimeoutError("timed out"))
    with pytest.raises(RecordSourceError, match="timed out"):
        fetch_statements(URL)


def test_fetch_rejects_invalid_json(monkeypatch):
    _serve(monkeypatch, b"<html>oops</html>")
    with pytest.raises(RecordSourceError, match="not valid JSON"):
        fetch_statements(URL)


def test_fetch_rejects_non_array_payload(monkeypatch):
    _serve(monkeypatch, b'{"statements": []}')
    with pytest.raises(RecordSourceError, match="JSON array"):
        fetch_statements(URL)


def test_fetch_reports_malformed_url():
    # Rejected by http.client before any connection is attempted.
    with pytest.raises(RecordSourceError, match="notaport"):
        fetch_statements("http://127.0.0.1:notaport/statements")


def test_fetch_reports_truncated_body(monkeypatch):
    class _Truncated(_FakeResponse):
        def read(self) -> bytes:
            raise http.client.IncompleteRead(b"[{", 40)

    monkeypatch.setattr(urllib.request, "urlopen", lambda req, timeout=None: _Truncated(b""))
    with pytest.raises(RecordSourceError, match="failed"):
        fetch_statements(URL)
