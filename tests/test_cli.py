"""Tests for CLI entrypoint behavior."""

import logging
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from hrportal import __version__
from hrportal.cli.commands import configure_logging
from hrportal.cli.main import app
from hrportal.exceptions import AuthenticationError, HRPortalError
from hrportal.session import load_session, save_session

runner = CliRunner()

USER = {"username": "alice1", "loginTime": "2026-10-19T08:30:15.123Z"}


def _client_returning(result=None, error=None):
    client = MagicMock()
    client.__enter__.return_value = client
    if error is not None:
        client.validate_login.side_effect = error
    else:
        client.validate_login.return_value = result
    return client


def test_root_version_option():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"hrportal {__version__}"


def test_version_subcommand():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"hrportal {__version__}"


class TestServe:
    def test_missing_configuration_exits(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_SHEET_ID", raising=False)
        with patch("hrportal.server.serve") as mock_serve:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 1
        assert "Missing required configuration" in result.stdout
        mock_serve.assert_not_called()

    def test_starts_server(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_SHEETS_API_KEY", "AIza-key")
        monkeypatch.setenv("GOOGLE_SHEET_ID", "sheet-1")
        with patch("hrportal.server.serve") as mock_serve, patch("hrportal.cli.commands.serve.configure_logging"):
            result = runner.invoke(app, ["serve", "--port", "9001"])

        assert result.exit_code == 0
        settings = mock_serve.call_args[0][0]
        assert settings.sheet_id == "sheet-1"
        assert mock_serve.call_args[1] == {"host": None, "port": 9001}


    def test_port_zero_passed_through(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_SHEETS_API_KEY", "AIza-key")
        monkeypatch.setenv("GOOGLE_SHEET_ID", "sheet-1")
        with patch("hrportal.server.serve") as mock_serve, patch("hrportal.cli.commands.serve.configure_logging"):
            result = runner.invoke(app, ["serve", "--port", "0"])

        assert result.exit_code == 0
        assert mock_serve.call_args[1] == {"host": None, "port": 0}
        assert "8787" not in result.stdout


def test_configure_logging_quiets_http_client_loggers():
    loggers = [logging.getLogger(name) for name in ("httpx", "httpcore")]
    previous = [logger.level for logger in loggers]
    try:
        configure_logging("INFO")
        assert all(logger.level == logging.WARNING for logger in loggers)
    finally:
        for logger, level in zip(loggers, previous):
            logger.setLevel(level)


class TestAuth:
    def test_login_success_saves_session(self, session_path):
        client = _client_returning({"success": True, "message": "Login successful", "user": USER})
        with patch("hrportal.cli.commands.auth.PortalClient", return_value=client):
            result = runner.invoke(app, ["auth", "login", "-u", " alice1 ", "-p", "secret"])

        assert result.exit_code == 0
        assert "Login successful" in result.stdout
        client.validate_login.assert_called_once_with("alice1", "secret")
        assert load_session()["user"] == USER

    def test_login_prompts_for_password(self, session_path):
        client = _client_returning({"success": True, "message": "Login successful", "user": USER})
        with patch("hrportal.cli.commands.auth.PortalClient", return_value=client):
            result = runner.invoke(app, ["auth", "login", "-u", "alice1"], input="secret\n")

        assert result.exit_code == 0
        client.validate_login.assert_called_once_with("alice1", "secret")

    def test_login_rejected(self, session_path):
        error = AuthenticationError("Invalid username or password", status_code=401)
        client = _client_returning(error=error)
        with patch("hrportal.cli.commands.auth.PortalClient", return_value=client):
            result = runner.invoke(app, ["auth", "login", "-u", "alice1", "-p", "wrong"])

        assert result.exit_code == 1
        assert "Invalid username or password" in result.stdout
        assert load_session() is None

    def test_login_service_unavailable(self, session_path):
        client = _client_returning(error=HRPortalError("Authentication service unavailable"))
        with patch("hrportal.cli.commands.auth.PortalClient", return_value=client):
            result = runner.invoke(app, ["auth", "login", "-u", "alice1", "-p", "secret"])

        assert result.exit_code == 1
        assert "Authentication service unavailable" in result.stdout

    def test_login_empty_username_makes_no_request(self, session_path):
        with patch("hrportal.cli.commands.auth.PortalClient") as mock_client:
            result = runner.invoke(app, ["auth", "login", "-u", "   ", "-p", "secret"])

        assert result.exit_code == 1
        mock_client.assert_not_called()

    def test_login_when_already_logged_in(self, session_path):
        save_session(USER)
        with patch("hrportal.cli.commands.auth.PortalClient") as mock_client:
            result = runner.invoke(app, ["auth", "login", "-u", "alice1", "-p", "secret"])

        assert result.exit_code == 1
        assert "Already logged in as alice1" in result.stdout
        mock_client.assert_not_called()

    def test_status_and_logout(self, session_path):
        save_session(USER)

        status = runner.invoke(app, ["auth", "status"])
        assert status.exit_code == 0
        assert "alice1" in status.stdout

        logout = runner.invoke(app, ["auth", "logout"])
        assert "Successfully logged out" in logout.stdout

        status = runner.invoke(app, ["auth", "status"])
        assert status.exit_code == 1
        assert "Not logged in" in status.stdout
