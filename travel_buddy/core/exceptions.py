"""
Domain exceptions for Travel Buddy.

Services and dependencies raise these instead of building HTTP responses.
Each error carries the HTTP status it maps to, and the server registers a
single handler that turns any ``TravelBuddyError`` into a JSON response.
"""

from __future__ import annotations


class TravelBuddyError(Exception):
    """Base class for every expected, client-facing error."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code})"


class ValidationFailed(TravelBuddyError):
    """The request is well-formed but violates a business rule."""

    status_code = 400


class Conflict(TravelBuddyError):
    """The action was already performed (duplicate swipe, existing member...)."""

    status_code = 400


class AuthenticationFailed(TravelBuddyError):
    """Missing, invalid or stale credentials."""

    status_code = 401


class PermissionDenied(TravelBuddyError):
    """The caller is authenticated but not allowed to do this."""

    status_code = 403


class NotFound(TravelBuddyError):
    """The addressed resource does not exist or is not visible to the caller."""

    status_code = 404


class AccountLocked(TravelBuddyError):
    """Too many failed logins; the account is temporarily locked."""

    status_code = 423


class RateLimitExceeded(TravelBuddyError):
    """The caller exceeded a request budget."""

    status_code = 429

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after
