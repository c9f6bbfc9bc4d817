"""Public model exports for fuzzydrive."""

from __future__ import annotations

from .file_record import FileRecord
from .results import MatchResult, SyncResult
from .snapshot import UNKNOWN_FOLDER_NAME, Snapshot

__all__ = [
    "FileRecord",
    "Snapshot",
    "MatchResult",
    "SyncResult",
    "UNKNOWN_FOLDER_NAME",
]
