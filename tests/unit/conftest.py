"""Pytest configuration and shared fixtures for unit tests."""

import pytest
from learndot import API, SANDBOX, NoDelay

TOKEN = "test-token"


@pytest.fixture(autouse=True)
def isolated_credentials(monkeypatch, tmp_path):
    """Keep the developer's real token out of every test."""
    monkeypatch.delenv("LEARNDOT_TOKEN", raising=False)
    monkeypatch.setenv("LEARNDOT_TOKEN_FILE", str(tmp_path / "missing_token"))


@pytest.fixture
def api():
    """API client against the sandbox with the rate-limit pause disabled."""
    with API(token=TOKEN, system=SANDBOX, delay=NoDelay()) as client:
        yield client
