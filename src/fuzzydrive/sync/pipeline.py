"""SyncPipeline: rebuild the snapshot from the configured folders."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Protocol, Sequence

from fuzzydrive.errors import ConfigurationMissingError, FolderNameLookupError, RemoteFetchError
from fuzzydrive.models import FileRecord, Snapshot
from fuzzydrive.storage import SnapshotStore
from fuzzydrive.util.mime import is_folder
from fuzzydrive.util.time import elapsed_since, now_utc, parse_rfc3339

logger = logging.getLogger(__name__)

SYNC_INTERVAL: timedelta = timedelta(hours=1)


class RemoteLister(Protocol):
    def list_children(self, folder_id: str, page_token: Optional[str] = None) -> Any: ...

    def get_metadata(self, file_id: str) -> dict[str, Any]: ...


def sync_is_due(
    store: SnapshotStore,
    now: datetime,
    interval: timedelta = SYNC_INTERVAL,
) -> bool:
    """True when there is no snapshot or the last sync is at least `interval` old."""
    last_sync = store.last_sync()
    if last_sync is None:
        return True
    return elapsed_since(last_sync, now) >= interval


class SyncPipeline:
    """
    Fetch direct children of each folder and replace the snapshot.

    Folders are fetched one after another in the given order. Nothing is
    written unless every listing succeeds.
    """

    def __init__(
        self,
        remote: RemoteLister,
        store: SnapshotStore,
        *,
        clock: Callable[[], datetime] = now_utc,
        interval: timedelta = SYNC_INTERVAL,
    ) -> None:
        self._remote = remote
        self._store = store
        self._clock = clock
        self._interval = interval

    def sync(self, folder_ids: Sequence[str]) -> tuple[list[FileRecord], dict[str, str]]:
        """
        Run a full sync.

        Raises:
            ConfigurationMissingError: if `folder_ids` is empty.
            RemoteFetchError: if any listing page fails.
            PersistenceError: if the snapshot cannot be written.
        """
        if not folder_ids:
            raise ConfigurationMissingError("No target folder ids are configured")

        logger.info("Fetching direct children of %d folder(s)", len(folder_ids))
        records: list[FileRecord] = []
        seen: set[str] = set()
        for index, folder_id in enumerate(folder_ids, start=1):
            logger.info("Folder %d/%d: %s", index, len(folder_ids), folder_id)
            for item in self._list_folder_files(folder_id):
                record = _item_to_file_record(item)
                if record.id in seen:
                    continue
                seen.add(record.id)
                records.append(record)

        folder_names = self._resolve_folder_names(folder_ids)

        snapshot = Snapshot(
            files=records,
            last_sync=self._clock(),
            folder_names=folder_names,
            sync_token=None,
        )
        self._store.save(snapshot)
        logger.info("Sync complete: %d files", len(records))
        return list(records), dict(folder_names)

    def check_and_sync(self, folder_ids: Sequence[str]) -> bool:
        """
        Sync only if the snapshot is missing or older than the interval.

        For callers that already hold a remote. `SearchService.check_and_sync`
        applies the same `sync_is_due` gate itself so a fresh snapshot needs no
        credential, then runs `sync` on a pipeline built after authenticating.
        """
        if not sync_is_due(self._store, self._clock(), self._interval):
            logger.info("Snapshot is fresh; skipping sync")
            return False
        self.sync(folder_ids)
        return True

    def _list_folder_files(self, folder_id: str) -> list[dict[str, Any]]:
        files: list[dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            page = self._remote.list_children(folder_id, page_token)
            for item in page.items:
                if is_folder(item.get("mimeType", "")):
                    continue
                files.append(item)

            page_token = page.next_page_token
            if not page_token:
                break

        return files

    def _resolve_folder_names(self, folder_ids: Sequence[str]) -> dict[str, str]:
        names: dict[str, str] = {}
        for folder_id in folder_ids:
            try:
                names[folder_id] = self._lookup_folder_name(folder_id)
            except FolderNameLookupError as exc:
                logger.warning("Could not resolve folder name for %s: %s", folder_id, exc)
        return names

    def _lookup_folder_name(self, folder_id: str) -> str:
        try:
            data = self._remote.get_metadata(folder_id)
        except RemoteFetchError as exc:
            raise FolderNameLookupError(
                "Folder metadata request failed",
                details={"folder_id": folder_id},
                cause=exc,
            ) from exc

        name = data.get("name") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name:
            raise FolderNameLookupError(
                "Folder metadata has no name",
                details={"folder_id": folder_id},
            )
        return name


def _item_to_file_record(data: dict[str, Any]) -> FileRecord:
    file_id = data.get("id")
    name = data.get("name")
    link = data.get("webViewLink")
    mime_type = data.get("mimeType")
    parents = data.get("parents") or []

    modified_time = None
    if isinstance(data.get("modifiedTime"), str):
        try:
            modified_time = parse_rfc3339(data["modifiedTime"])
        except ValueError:
            modified_time = None

    return FileRecord(
        id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        web_view_link=link if isinstance(link, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        modified_time=modified_time,
        parents=list(parents) if isinstance(parents, list) else [],
    )
