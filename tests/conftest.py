"""Test configuration for HR portal tests."""

import pytest

from hrportal import Settings
from hrportal.exceptions import FetchError


class FakeSource:
    """Credential source returning a fixed grid (or raising) and recording calls."""

    def __init__(self, grid=None, error=None):
        self.grid = grid
        self.error = error
        self.calls = []

    def fetch(self, sheet_id, sheet_range, api_key):
        self.calls.append((sheet_id, sheet_range, api_key))
        if self.error is not None:
            raise self.error
        if not self.grid:
            raise FetchError(FetchError.EMPTY_DATASET)
        return self.grid


@pytest.fixture
def settings():
    return Settings(api_key="AIza-test", sheet_id="sheet-123", sheet_range="Sheet1!A:C")


@pytest.fixture
def grid():
    return [
        ["Employee", "Login Name", "Password"],
        ["Alice", "alice1", "secret"],
        ["Bob", "bob", "hunter2"],
    ]


@pytest.fixture
def make_source():
    return FakeSource


@pytest.fixture
def session_path(tmp_path, monkeypatch):
    """Redirect the session file to a temp directory."""
    path = tmp_path / ".hrportal" / "session.json"
    monkeypatch.setattr("hrportal.session.get_session_path", lambda: path)
    return path
