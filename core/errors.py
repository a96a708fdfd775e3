"""
Error taxonomy for calls made against the LedgerOS backend.

- AuthorizationError: HTTP 401, handled once by the client interceptor
- RequestRejected: any other non-2xx answer, usually with a server message
- NetworkError: the request never produced a response
- ResponseInvalid: a 2xx answer whose body does not have the expected shape
- ValidationFailure: input rejected locally before any request was issued
"""
from __future__ import annotations
from typing import Any, Optional


class LedgerError(Exception):
    """Base class for every error surfaced to the user."""

    detail: Optional[str] = None


class ApiError(LedgerError):
    """The backend answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Optional[str] = None, path: str = ""):
        self.status_code = status_code
        self.detail = detail
        self.path = path
        super().__init__(f"{status_code} on {path or 'request'}: {detail or 'no detail'}")


class AuthorizationError(ApiError):
    """HTTP 401: the session token is missing, expired or revoked."""


class RequestRejected(ApiError):
    """Validation, business-rule or server failure other than 401."""


class NetworkError(LedgerError):
    """Transport failure: connection refused, timeout, DNS and the like."""


class ResponseInvalid(LedgerError):
    """The server answered, but its payload could not be read into our models."""

    def __init__(self, path: str, problem: str):
        self.path = path
        self.problem = problem
        super().__init__(f"Unexpected response from {path}: {problem}")


class ValidationFailure(LedgerError):
    """Client-side validation failure; no request was sent."""

    def __init__(self, message: str):
        self.detail = message
        super().__init__(message)


def extract_detail(body: Any) -> Optional[str]:
    """
    Pull a human-readable message out of an error response body.

    FastAPI answers with ``{"detail": "..."}`` for business errors and
    ``{"detail": [{"msg": ...}, ...]}`` for request validation errors.
    """
    if isinstance(body, dict):
        detail = body.get("detail", body.get("message"))
    else:
        detail = body

    if isinstance(detail, str):
        return detail.strip() or None
    if isinstance(detail, list):
        parts = []
        for item in detail:
            if isinstance(item, dict):
                msg = item.get("msg")
                if msg:
                    parts.append(str(msg))
            elif item:
                parts.append(str(item))
        return "; ".join(parts) or None
    return None


def user_message(exc: BaseException, fallback: str) -> str:
    """Server-supplied message when there is one, otherwise ``fallback``."""
    if isinstance(exc, LedgerError) and exc.detail:
        return exc.detail
    return fallback
