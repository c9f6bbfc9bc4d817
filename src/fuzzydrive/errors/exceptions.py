"""Exception hierarchy and HTTP error mapping for fuzzydrive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class FuzzyDriveError(Exception):
    """
    Base exception for fuzzydrive.

    Attributes:
        details: Optional structured information (e.g., HTTP status, path).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ConfigurationMissingError(FuzzyDriveError):
    """Raised when target folders or OAuth client credentials are not configured."""


class AuthenticationFailedError(FuzzyDriveError):
    """Raised when interactive authorization cannot obtain or exchange a code."""


class TokenRefreshError(FuzzyDriveError):
    """Raised when a refresh grant is rejected (recoverable)."""


class PersistenceError(FuzzyDriveError):
    """Raised on read/write/parse failures of on-disk state."""


class FolderNameLookupError(FuzzyDriveError):
    """Raised when a folder display name cannot be resolved (non-fatal)."""


class RemoteFetchError(FuzzyDriveError):
    """Raised when a Drive API call fails (5xx, unknown 4xx, etc.)."""


class RemoteAuthError(RemoteFetchError):
    """Raised when Drive rejects the access token (HTTP 401)."""


class PermissionDeniedError(RemoteFetchError):
    """Raised when access is denied (HTTP 403)."""


class NotFoundError(RemoteFetchError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class RateLimitError(RemoteFetchError):
    """Raised when rate-limited (HTTP 429, or 403 with a rate-limit reason)."""


class NetworkError(RemoteFetchError):
    """Raised when network/timeout issues prevent the request."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to fuzzydrive exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_RATE_LIMIT_REASONS: tuple[str, ...] = (
    "rateLimitExceeded",
    "userRateLimitExceeded",
)


def _is_rate_limit_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() == reason.lower() for key in _RATE_LIMIT_REASONS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> RemoteFetchError:
    """
    Map an HTTP error to a fuzzydrive exception.

    Policy:
        - 401 -> RemoteAuthError
        - 403 -> PermissionDeniedError, but RateLimitError for rate-limit reasons
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - otherwise -> RemoteFetchError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 401:
        return RemoteAuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_rate_limit_reason(info.reason):
            return RateLimitError(message, details=details, cause=cause)
        return PermissionDeniedError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return RemoteFetchError(message, details=details, cause=cause)
