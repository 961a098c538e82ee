"""
tests/test_healthcheck.py

Container health check exit codes.
"""

from __future__ import annotations

import importlib.util
import io
from pathlib import Path
from urllib.error import URLError

import pytest

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "healthcheck.py"


def _load_healthcheck():
    module_spec = importlib.util.spec_from_file_location("healthcheck_script", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class _Response(io.BytesIO):
    def __init__(self, body: bytes, status: int = 200) -> None:
        super().__init__(body)
        self.status = status


@pytest.fixture
def healthcheck():
    return _load_healthcheck()


def test_ok_body_exits_zero(healthcheck, monkeypatch) -> None:
    requested: list[tuple[str, float]] = []

    def _urlopen(url, timeout):
        requested.append((url, timeout))
        return _Response(b'{"status": "ok"}')

    monkeypatch.setenv("PORT", "4100")
    monkeypatch.delenv("HEALTHCHECK_TIMEOUT_SECONDS", raising=False)
    monkeypatch.setattr(healthcheck, "urlopen", _urlopen)

    assert healthcheck.main() == 0
    assert requested == [("http://127.0.0.1:4100/health", 2.0)]


def test_unexpected_body_exits_one(healthcheck, monkeypatch) -> None:
    monkeypatch.setattr(healthcheck, "urlopen", lambda url, timeout: _Response(b'{"status": "degraded"}'))

    assert healthcheck.main() == 1


def test_unreachable_service_exits_one(healthcheck, monkeypatch) -> None:
    def _refused(url, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(healthcheck, "urlopen", _refused)

    assert healthcheck.main() == 1


def test_malformed_timeout_exits_one(healthcheck, monkeypatch) -> None:
    called: list[str] = []
    monkeypatch.setenv("HEALTHCHECK_TIMEOUT_SECONDS", "two")
    monkeypatch.setattr(healthcheck, "urlopen", lambda url, timeout: called.append(url))

    assert healthcheck.main() == 1
    assert called == []
