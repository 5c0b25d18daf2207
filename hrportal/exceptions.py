"""Custom exceptions raised by the HR portal."""

from __future__ import annotations

from typing import Any, Optional


class HRPortalError(Exception):
    """Base exception for all portal specific failures."""


class ConfigurationError(HRPortalError):
    """Raised when required settings are missing or malformed."""


class FetchError(HRPortalError):
    """Raised when the credential spreadsheet cannot be read.

    ``reason`` is a short machine-readable tag such as ``"http-error"``,
    ``"transport-error"``, ``"timeout"`` or ``"empty-dataset"``.
    """

    EMPTY_DATASET = "empty-dataset"

    def __init__(self, reason: str, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code

    @property
    def is_empty_dataset(self) -> bool:
        return self.reason == self.EMPTY_DATASET


class APIError(HRPortalError):
    """Raised when the portal login endpoint returns an unexpected response."""

    def __init__(self, message: str, status_code: int, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:  # pragma: no cover - repr helper
        return f"{self.status_code}: {self.message}"


class AuthenticationError(APIError):
    """Raised when the portal rejects the supplied credentials."""
