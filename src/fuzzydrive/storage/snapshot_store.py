"""JSON persistence for the snapshot (files, folder names, last sync)."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from fuzzydrive.errors import PersistenceError
from fuzzydrive.models import FileRecord, Snapshot
from fuzzydrive.util.kana import kana_to_romaji_keywords
from fuzzydrive.util.time import parse_rfc3339, to_rfc3339

from .atomic import atomic_write_text, file_lock, lock_path_for, read_text

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Load and replace the snapshot file.

    Writers hold an advisory lock and replace the file atomically, so a reader
    never observes a half-written snapshot.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot with `snapshot` in full."""
        text = json.dumps(_snapshot_to_dict(snapshot), ensure_ascii=False, indent=2)
        with file_lock(lock_path_for(self._path)):
            atomic_write_text(self._path, text)
        logger.info("Saved %d files to %s", len(snapshot.files), self._path)

    def load(self) -> Optional[Snapshot]:
        """Return the stored snapshot, or None if no sync has completed yet."""
        text = read_text(self._path)
        if text is None:
            return None

        try:
            data = json.loads(text)
            return _snapshot_from_dict(data)
        except (ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(
                "Snapshot file is corrupt",
                details={"path": str(self._path)},
                cause=exc,
            ) from exc

    def last_sync(self) -> Optional[datetime]:
        snapshot = self.load()
        return snapshot.last_sync if snapshot is not None else None

    def files(self) -> list[FileRecord]:
        snapshot = self.load()
        return list(snapshot.files) if snapshot is not None else []

    def folder_names(self) -> dict[str, str]:
        snapshot = self.load()
        return dict(snapshot.folder_names) if snapshot is not None else {}

    def file_count(self) -> int:
        return len(self.files())


def _snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    files = []
    for record in snapshot.files:
        files.append(
            {
                "id": record.id,
                "name": record.name,
                "web_view_link": record.web_view_link,
                "modified_time": (
                    to_rfc3339(record.modified_time) if record.modified_time else None
                ),
                "mime_type": record.mime_type,
                "parents": list(record.parents),
                "parent_folder_name": snapshot.folder_name_for(record),
                "keywords": [record.name],
                "romaji_keywords": kana_to_romaji_keywords(record.name),
            }
        )

    return {
        "files": files,
        "folders": dict(snapshot.folder_names),
        "last_sync": to_rfc3339(snapshot.last_sync),
        "sync_token": snapshot.sync_token,
    }


def _snapshot_from_dict(data: dict[str, Any]) -> Snapshot:
    files: list[FileRecord] = []
    for item in data["files"]:
        modified = item.get("modified_time")
        files.append(
            FileRecord(
                id=item["id"],
                name=item["name"],
                web_view_link=item.get("web_view_link") or "",
                mime_type=item.get("mime_type") or "",
                modified_time=parse_rfc3339(modified) if modified else None,
                parents=list(item.get("parents") or []),
            )
        )

    folders = data.get("folders") or {}
    if not isinstance(folders, dict):
        raise TypeError("folders must be an object")

    return Snapshot(
        files=files,
        last_sync=parse_rfc3339(data["last_sync"]),
        folder_names={str(k): str(v) for k, v in folders.items()},
        sync_token=data.get("sync_token"),
    )
