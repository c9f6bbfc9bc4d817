"""Snapshot model: the complete local copy of indexed data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .file_record import FileRecord

UNKNOWN_FOLDER_NAME: str = "Unknown folder"


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    File records, folder display names and the time they were fetched.

    A snapshot is always replaced as a whole; nothing mutates one in place.
    """

    files: list[FileRecord]
    last_sync: datetime
    folder_names: dict[str, str] = field(default_factory=dict)
    sync_token: Optional[str] = None

    def folder_name_for(self, record: FileRecord) -> str:
        """Display name of the record's first parent, or a placeholder."""
        if not record.parents:
            return UNKNOWN_FOLDER_NAME
        return self.folder_names.get(record.parents[0], UNKNOWN_FOLDER_NAME)
