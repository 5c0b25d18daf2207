"""Login validation against the credential spreadsheet.

A request is checked in a single stateless pass: input check, configuration
check, one fetch, header resolution, row scan. Every anticipated failure
comes back as a :class:`Failure` verdict rather than an exception.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple, Union

from .config import Settings
from .exceptions import FetchError
from .sheets import CredentialGrid

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Why a login attempt failed."""

    BAD_REQUEST = "BadRequest"
    CONFIG_ERROR = "ConfigError"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    SCHEMA_ERROR = "SchemaError"
    INVALID_CREDENTIALS = "InvalidCredentials"


MSG_REQUIRED = "Username and password are required"
MSG_CONFIG = "Authentication service configuration error"
MSG_UPSTREAM = "Unable to access user database"
MSG_EMPTY = "User database is empty"
MSG_SCHEMA = "User database schema error"
MSG_INVALID = "Invalid username or password"
MSG_SUCCESS = "Login successful"


class CredentialSource(Protocol):
    def fetch(self, sheet_id: str, sheet_range: str, api_key: str) -> CredentialGrid: ...


@dataclass(frozen=True)
class LoginRequest:
    username: str
    password: str

    @classmethod
    def from_payload(cls, payload: Any) -> Optional[LoginRequest]:
        """Build a request from a decoded JSON body.

        Returns None when the body is not an object; non-string fields are
        treated as absent.
        """
        if not isinstance(payload, dict):
            return None
        username = payload.get("username")
        password = payload.get("password")
        return cls(
            username=username if isinstance(username, str) else "",
            password=password if isinstance(password, str) else "",
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.username.strip()) and bool(self.password.strip())


@dataclass(frozen=True)
class UserRecord:
    username: str
    login_time: str

    def to_dict(self) -> dict[str, str]:
        return {"username": self.username, "loginTime": self.login_time}


@dataclass(frozen=True)
class Success:
    user: UserRecord
    message: str = MSG_SUCCESS

    success = True


@dataclass(frozen=True)
class Failure:
    error_kind: ErrorKind
    message: str

    success = False


LoginVerdict = Union[Success, Failure]


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_columns(headers: Sequence[str]) -> Optional[Tuple[int, int]]:
    """Locate the login-name and password columns in a header row.

    Matching is case-insensitive substring search. The login-name column is
    the first header containing both "login" and "name"; the password column
    is the first header containing "password".

    Returns:
        ``(login_name_col, password_col)``, or None if either is missing.
    """
    login_col = -1
    password_col = -1

    for index, header in enumerate(headers):
        normalized = header.lower()
        if login_col < 0 and "login" in normalized and "name" in normalized:
            login_col = index
        if password_col < 0 and "password" in normalized:
            password_col = index

    if login_col < 0 or password_col < 0:
        return None
    return login_col, password_col


def find_user_row(
    rows: Sequence[Sequence[str]], login_col: int, username: str
) -> Optional[Sequence[str]]:
    """Return the first data row whose login-name cell equals ``username``."""
    for row in rows:
        if login_col < len(row) and row[login_col] == username:
            return row
    return None


def check_credentials(grid: CredentialGrid, username: str, password: str) -> Optional[ErrorKind]:
    """Check a username/password pair against a credential grid.

    Returns None when the pair matches, otherwise the failure kind. The first
    row carrying the username decides; later rows with the same login name
    are never consulted.
    """
    columns = resolve_columns(grid[0])
    if columns is None:
        return ErrorKind.SCHEMA_ERROR

    login_col, password_col = columns
    row = find_user_row(grid[1:], login_col, username)
    if row is None or password_col >= len(row) or row[password_col] != password:
        return ErrorKind.INVALID_CREDENTIALS
    return None


class LoginValidator:
    """Validates login requests against the credential source.

    Example:
        >>> settings = Settings.from_env()
        >>> with SheetsCredentialSource(timeout=settings.fetch_timeout) as source:
        ...     validator = LoginValidator(settings, source)
        ...     verdict = validator.validate(LoginRequest("alice1", "secret"))
    """

    def __init__(
        self,
        settings: Optional[Settings],
        source: CredentialSource,
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._settings = settings
        self._source = source
        self._clock = clock

    def validate(self, request: LoginRequest) -> LoginVerdict:
        if not request.is_complete:
            logger.warning("Login rejected: %s", ErrorKind.BAD_REQUEST.value)
            return Failure(ErrorKind.BAD_REQUEST, MSG_REQUIRED)

        settings = self._settings
        if settings is None or not settings.is_complete:
            logger.error("Login rejected: %s (credential source not configured)", ErrorKind.CONFIG_ERROR.value)
            return Failure(ErrorKind.CONFIG_ERROR, MSG_CONFIG)

        try:
            grid = self._source.fetch(settings.sheet_id, settings.sheet_range, settings.api_key)
        except FetchError as e:
            logger.error("Login rejected: %s (reason=%s)", ErrorKind.UPSTREAM_UNAVAILABLE.value, e.reason)
            message = MSG_EMPTY if e.is_empty_dataset else MSG_UPSTREAM
            return Failure(ErrorKind.UPSTREAM_UNAVAILABLE, message)

        if not grid:
            logger.error("Login rejected: %s (reason=%s)", ErrorKind.UPSTREAM_UNAVAILABLE.value, FetchError.EMPTY_DATASET)
            return Failure(ErrorKind.UPSTREAM_UNAVAILABLE, MSG_EMPTY)

        error_kind = check_credentials(grid, request.username, request.password)
        if error_kind is ErrorKind.SCHEMA_ERROR:
            logger.error("Login rejected: %s (headers=%r)", error_kind.value, grid[0])
            return Failure(error_kind, MSG_SCHEMA)
        if error_kind is ErrorKind.INVALID_CREDENTIALS:
            logger.warning("Login rejected: %s for user %r", error_kind.value, request.username)
            return Failure(error_kind, MSG_INVALID)

        logger.info("Login successful for user %r", request.username)
        return Success(UserRecord(username=request.username, login_time=utc_timestamp(self._clock())))
