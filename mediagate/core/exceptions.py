"""
mediagate/core/exceptions.py

Custom exception hierarchy for the application.

Raising typed exceptions from services lets controllers and the upload
gateway catch specific cases and map them to results or HTTP status codes
without leaking internals.
"""

from typing import Optional


class AppBaseException(Exception):
    """Root exception - catch-all for any application-level error."""


# ── Upload exceptions ──────────────────────────────────────────────────────────

class UploadValidationError(AppBaseException):
    """Raised when a file fails type or size checks before any network call."""


class ProviderError(AppBaseException):
    """
    Raised by a media provider adapter when the external service rejects
    a call. ``status_code`` is the provider's HTTP status when known.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ── API client exceptions ──────────────────────────────────────────────────────

class ApiError(AppBaseException):
    """An outbound API call ended in an error the client could not recover."""

    def __init__(self, message: str, status_code: Optional[int] = None, response=None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class AuthError(ApiError):
    """401 still returned after the one permitted token refresh."""


class NetworkError(ApiError):
    """Any other HTTP error status, or a transport-level failure."""


class SessionExpiredError(ApiError):
    """The token refresh itself failed; the stored session has been cleared."""
