"""Public storage exports for fuzzydrive."""

from __future__ import annotations

from .atomic import atomic_write_text, file_lock, lock_path_for, read_text
from .snapshot_store import SnapshotStore

__all__ = [
    "SnapshotStore",
    "atomic_write_text",
    "file_lock",
    "lock_path_for",
    "read_text",
]
