"""HTTP client for the portal login endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from .config import DEFAULT_CLIENT_TIMEOUT_SECONDS, resolve_portal_url
from .exceptions import APIError, AuthenticationError, HRPortalError

SERVICE_UNAVAILABLE = "Authentication service unavailable"


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return fallback


def handle_response(response: httpx.Response) -> dict[str, Any]:
    """Process a login endpoint response, raising appropriate errors for failures."""
    if response.status_code == 401:
        raise AuthenticationError(
            message=_error_message(response, "Invalid username or password"),
            status_code=401,
            response=response,
        )

    if response.status_code >= 400:
        raise APIError(
            message=_error_message(response, "Login request failed"),
            status_code=response.status_code,
            response=response,
        )

    if response.content:
        return response.json()
    return {}


class PortalClient:
    """Client for the HR portal login endpoint.

    Example:
        >>> from hrportal import PortalClient
        >>> with PortalClient("http://127.0.0.1:8787") as client:
        ...     result = client.validate_login("alice1", "secret")
        ...     print(result["user"])
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the portal client.

        Args:
            base_url: Login endpoint URL. If not provided, reads HRPORTAL_URL
                and falls back to the local default.
            timeout: Request timeout in seconds (default: 30).
        """
        self._base_url = resolve_portal_url(base_url)
        self._client = httpx.Client(timeout=timeout)

    def validate_login(self, username: str, password: str) -> dict[str, Any]:
        """Check a username/password pair.

        Returns:
            The decoded success body: ``success``, ``message`` and ``user``.

        Raises:
            AuthenticationError: If the credentials were rejected.
            APIError: If the endpoint returned any other error status.
            HRPortalError: If the endpoint could not be reached.
        """
        try:
            response = self._client.post(
                self._base_url,
                headers={"Content-Type": "application/json"},
                json={"username": username, "password": password},
            )
        except httpx.HTTPError as e:
            raise HRPortalError(SERVICE_UNAVAILABLE) from e
        return handle_response(response)

    def close(self) -> None:
        """Release the underlying HTTP client resources."""
        self._client.close()

    def __enter__(self) -> PortalClient:
        return self

    def __exit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        self.close()
