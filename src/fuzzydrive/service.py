"""SearchService: wires config, credentials, Drive, snapshot and search."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from fuzzydrive.auth import Credential, CredentialManager, CredentialStore, TokenClient
from fuzzydrive.config import (
    AppConfig,
    AppContext,
    load_config,
    require_client_credentials,
    require_target_folders,
    save_config,
)
from fuzzydrive.controller import DriveController, probe_credential
from fuzzydrive.models import MatchResult, SyncResult
from fuzzydrive.search import FuzzySearchEngine
from fuzzydrive.storage import SnapshotStore
from fuzzydrive.sync import RemoteLister, SyncPipeline, sync_is_due
from fuzzydrive.util.time import now_utc

logger = logging.getLogger(__name__)

RemoteFactory = Callable[[Credential], RemoteLister]


class SearchService:
    """High-level entry point used by the CLI: init, sync, check-sync, search."""

    def __init__(self, context: AppContext) -> None:
        context.ensure_dirs()
        self._context = context
        self._store = SnapshotStore(context.snapshot_path)
        self._credential_store = CredentialStore(context.token_path)
        self._token_client = TokenClient()
        self._credential_manager: Optional[CredentialManager] = None
        self._remote_factory: RemoteFactory = DriveController
        self._engine = FuzzySearchEngine()
        self._clock: Callable[[], datetime] = now_utc

    @classmethod
    def from_components(
        cls,
        context: AppContext,
        *,
        credential_manager: CredentialManager,
        remote_factory: RemoteFactory,
        clock: Callable[[], datetime] = now_utc,
    ) -> "SearchService":
        """Create service with injected collaborators (useful for tests)."""
        obj = cls(context)
        obj._credential_manager = credential_manager
        obj._remote_factory = remote_factory
        obj._clock = clock
        return obj

    @property
    def snapshot_store(self) -> SnapshotStore:
        return self._store

    def initialize(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ) -> int:
        """
        Validate config, authenticate, and run a first sync if the snapshot is empty.

        Returns:
            Number of files in the snapshot afterwards.
        """
        config = load_config(self._context.config_path)
        updated = config.with_overrides(client_id, client_secret)
        if updated is not config:
            save_config(self._context.config_path, updated)
            config = updated

        require_client_credentials(config, self._context.config_path)
        require_target_folders(config, self._context.config_path)

        credential = self._ensure_authenticated(config)

        count = self._store.file_count()
        if count == 0:
            logger.info("Running first sync")
            return self._run_sync(config, credential).file_count

        logger.info("Snapshot already holds %d files", count)
        return count

    def sync(self) -> SyncResult:
        """Authenticate and rebuild the snapshot from every configured folder."""
        config = load_config(self._context.config_path)
        require_target_folders(config, self._context.config_path)
        require_client_credentials(config, self._context.config_path)
        credential = self._ensure_authenticated(config)
        return self._run_sync(config, credential)

    def check_and_sync(self) -> Optional[SyncResult]:
        """
        Sync only when the snapshot is missing or older than an hour.

        The freshness check runs before authentication, so it uses
        `sync_is_due` directly instead of `SyncPipeline.check_and_sync`, which
        needs a remote up front.
        """
        if not sync_is_due(self._store, self._clock()):
            logger.info("Snapshot is fresh; skipping sync")
            return None
        return self.sync()

    def search(self, query: str) -> list[MatchResult]:
        return self._engine.search(query, self._store.files())

    def folder_names(self) -> dict[str, str]:
        return self._store.folder_names()

    # ----------------------------
    # Internals
    # ----------------------------
    def _ensure_authenticated(self, config: AppConfig) -> Credential:
        manager = self._credential_manager
        if manager is None:
            manager = CredentialManager(
                self._credential_store,
                self._token_client,
                probe_credential,
                auth_timeout_seconds=config.auth_timeout_seconds,
            )
        return manager.ensure_authenticated(config.google_client_id, config.google_client_secret)

    def _run_sync(self, config: AppConfig, credential: Credential) -> SyncResult:
        pipeline = SyncPipeline(self._remote_factory(credential), self._store, clock=self._clock)
        files, folder_names = pipeline.sync(config.target_folder_ids)
        snapshot = self._store.load()
        last_sync = snapshot.last_sync if snapshot is not None else self._clock()
        return SyncResult(files=files, folder_names=folder_names, last_sync=last_sync)
