"""fuzzydrive public API."""

from __future__ import annotations

from fuzzydrive.auth import (
    AuthorizationFlow,
    CallbackServer,
    Credential,
    CredentialManager,
    CredentialStore,
    TokenClient,
)
from fuzzydrive.config import AppConfig, AppContext
from fuzzydrive.controller import DriveController, ListPage
from fuzzydrive.errors import (
    AuthenticationFailedError,
    ConfigurationMissingError,
    FolderNameLookupError,
    FuzzyDriveError,
    PersistenceError,
    RemoteFetchError,
    TokenRefreshError,
)
from fuzzydrive.models import FileRecord, MatchResult, Snapshot, SyncResult
from fuzzydrive.search import FuzzySearchEngine
from fuzzydrive.service import SearchService
from fuzzydrive.storage import SnapshotStore
from fuzzydrive.sync import SyncPipeline

__all__ = [
    # High-level
    "SearchService",
    "AppContext",
    "AppConfig",
    # Auth
    "Credential",
    "CredentialStore",
    "CredentialManager",
    "TokenClient",
    "AuthorizationFlow",
    "CallbackServer",
    # Drive / Sync / Search
    "DriveController",
    "ListPage",
    "SnapshotStore",
    "SyncPipeline",
    "FuzzySearchEngine",
    # Models
    "FileRecord",
    "Snapshot",
    "MatchResult",
    "SyncResult",
    # Errors
    "FuzzyDriveError",
    "ConfigurationMissingError",
    "AuthenticationFailedError",
    "TokenRefreshError",
    "RemoteFetchError",
    "FolderNameLookupError",
    "PersistenceError",
]
