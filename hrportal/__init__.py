"""HR portal - spreadsheet-backed login validation service."""

from importlib.metadata import PackageNotFoundError, version

from .client import PortalClient
from .config import Settings
from .exceptions import APIError, AuthenticationError, ConfigurationError, FetchError, HRPortalError
from .sheets import SheetsCredentialSource
from .validator import ErrorKind, Failure, LoginRequest, LoginValidator, Success, UserRecord

__all__ = [
    "PortalClient",
    "Settings",
    "SheetsCredentialSource",
    "LoginValidator",
    "LoginRequest",
    "UserRecord",
    "Success",
    "Failure",
    "ErrorKind",
    "HRPortalError",
    "ConfigurationError",
    "FetchError",
    "APIError",
    "AuthenticationError",
]

try:
    __version__ = version("hrportal")
except PackageNotFoundError:
    __version__ = "0.1.0"
