"""Configuration for the HR portal login service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from .exceptions import ConfigurationError

DEFAULT_SHEETS_BASE_URL = "https://sheets.googleapis.com/v4"
DEFAULT_SHEET_RANGE = "Sheet1!A:C"
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787
DEFAULT_PORTAL_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
DEFAULT_CLIENT_TIMEOUT_SECONDS = 30.0

API_KEY_ENV = "GOOGLE_SHEETS_API_KEY"
SHEET_ID_ENV = "GOOGLE_SHEET_ID"
SHEET_RANGE_ENV = "HRPORTAL_SHEET_RANGE"
SHEETS_BASE_URL_ENV = "HRPORTAL_SHEETS_BASE_URL"
FETCH_TIMEOUT_ENV = "HRPORTAL_FETCH_TIMEOUT"
HOST_ENV = "HRPORTAL_HOST"
PORT_ENV = "HRPORTAL_PORT"
PORTAL_URL_ENV = "HRPORTAL_URL"

_PLACEHOLDER_VALUES = frozenset({"YOUR_API_KEY", "YOUR_GOOGLE_SHEETS_API_KEY", "YOUR_GOOGLE_SHEET_ID"})


def sanitize_base_url(url: str) -> str:
    """Ensure the base URL never ends with a trailing slash."""

    return url.rstrip("/")


def _is_real_value(value: str | None) -> bool:
    return bool(value and value.strip() and value.strip() not in _PLACEHOLDER_VALUES)


@dataclass(frozen=True)
class Settings:
    """Immutable settings resolved once at process start.

    The validator receives this value explicitly; nothing reads the
    environment while a request is being handled.
    """

    api_key: str | None = field(default=None, repr=False)
    sheet_id: str | None = None
    sheet_range: str = DEFAULT_SHEET_RANGE
    sheets_base_url: str = DEFAULT_SHEETS_BASE_URL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @property
    def is_complete(self) -> bool:
        return all(_is_real_value(v) for v in (self.api_key, self.sheet_id, self.sheet_range))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, *, strict: bool = True) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).
            strict: Raise when the API key or sheet id is missing.

        Raises:
            ConfigurationError: If ``strict`` and required values are absent,
                or if a numeric value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        api_key = env.get(API_KEY_ENV)
        sheet_id = env.get(SHEET_ID_ENV)

        if strict:
            missing = [
                name
                for name, value in ((API_KEY_ENV, api_key), (SHEET_ID_ENV, sheet_id))
                if not _is_real_value(value)
            ]
            if missing:
                raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        try:
            fetch_timeout = float(env.get(FETCH_TIMEOUT_ENV) or DEFAULT_FETCH_TIMEOUT_SECONDS)
            port = int(env.get(PORT_ENV) or DEFAULT_PORT)
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric configuration: {e}") from e

        if fetch_timeout <= 0:
            raise ConfigurationError(f"{FETCH_TIMEOUT_ENV} must be positive")

        return cls(
            api_key=api_key.strip() if _is_real_value(api_key) else None,
            sheet_id=sheet_id.strip() if _is_real_value(sheet_id) else None,
            sheet_range=env.get(SHEET_RANGE_ENV) or DEFAULT_SHEET_RANGE,
            sheets_base_url=sanitize_base_url(env.get(SHEETS_BASE_URL_ENV) or DEFAULT_SHEETS_BASE_URL),
            fetch_timeout=fetch_timeout,
            host=env.get(HOST_ENV) or DEFAULT_HOST,
            port=port,
        )


def resolve_portal_url(url: str | None = None) -> str:
    """Resolve the login endpoint URL.

    Order: explicit parameter > HRPORTAL_URL env var > local default.
    """
    if url and url.strip():
        return sanitize_base_url(url.strip())

    env_url = os.environ.get(PORTAL_URL_ENV)
    if env_url and env_url.strip():
        return sanitize_base_url(env_url.strip())

    return DEFAULT_PORTAL_URL
