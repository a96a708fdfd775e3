"""Client library for the LedgerOS REST backend."""
from .session import Session
from .client import ApiClient
from .auth import AuthApi, AuthStatus, bootstrap
from .resources import LedgerApi, Resource, ExportFile

__all__ = [
    "Session",
    "ApiClient",
    "AuthApi",
    "AuthStatus",
    "bootstrap",
    "LedgerApi",
    "Resource",
    "ExportFile",
]
