"""Tests for the uvicorn entry point."""

import pytest

from schoolguard import __main__ as entrypoint


pytestmark = pytest.mark.unit


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(
        entrypoint.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
    )
    return calls


def test_serves_the_application(monkeypatch, uvicorn_calls):
    monkeypatch.setattr("sys.argv", ["schoolguard", "--port", "9000"])

    entrypoint.main()

    [(app, kwargs)] = uvicorn_calls
    assert app == "schoolguard.main:app"
    assert kwargs["port"] == 9000
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["access_log"] is False


def test_reload_only_in_development(monkeypatch, uvicorn_calls):
    monkeypatch.setattr("sys.argv", ["schoolguard", "--reload"])
    monkeypatch.setattr(entrypoint.settings, "environment", "production")

    entrypoint.main()

    assert uvicorn_calls[0][1]["reload"] is False
