"""Result models for search and sync."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .file_record import FileRecord


@dataclass(slots=True, frozen=True)
class MatchResult:
    """A ranked search hit. `matched_ranges` are (start, end) offsets into the name."""

    file: FileRecord
    score: float
    matched_ranges: list[tuple[int, int]] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class SyncResult:
    """Outcome of one full sync."""

    files: list[FileRecord]
    folder_names: dict[str, str]
    last_sync: datetime

    @property
    def file_count(self) -> int:
        return len(self.files)
