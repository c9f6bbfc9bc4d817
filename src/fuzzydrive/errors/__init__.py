"""Public error exports for fuzzydrive."""

from __future__ import annotations

from .exceptions import (
    AuthenticationFailedError,
    ConfigurationMissingError,
    FolderNameLookupError,
    FuzzyDriveError,
    HttpErrorInfo,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    RateLimitError,
    RemoteAuthError,
    RemoteFetchError,
    TokenRefreshError,
    map_http_error,
)

__all__ = [
    "FuzzyDriveError",
    "ConfigurationMissingError",
    "AuthenticationFailedError",
    "TokenRefreshError",
    "PersistenceError",
    "FolderNameLookupError",
    "RemoteFetchError",
    "RemoteAuthError",
    "PermissionDeniedError",
    "NotFoundError",
    "RateLimitError",
    "NetworkError",
    "HttpErrorInfo",
    "map_http_error",
]
