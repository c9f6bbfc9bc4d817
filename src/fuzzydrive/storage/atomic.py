"""Whole-file replacement and advisory locking for on-disk state."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fuzzydrive.errors import PersistenceError

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)


def lock_path_for(path: Path) -> Path:
    """Sibling lock file used to serialize writers of `path`."""
    return path.with_name(path.name + ".lock")


@contextmanager
def file_lock(path: Path) -> Iterator[None]:
    """
    Hold an exclusive advisory lock on `path` (created if missing).

    Blocks until the lock is available. The lock is released when the block
    exits, including on error.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o600)
    except OSError as exc:
        raise PersistenceError(
            "Failed to open lock file",
            details={"path": str(path)},
            cause=exc,
        ) from exc

    try:
        _lock_fd(fd)
        logger.debug("Acquired lock %s", path)
        try:
            yield
        finally:
            _unlock_fd(fd)
            logger.debug("Released lock %s", path)
    finally:
        os.close(fd)


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace `path` with `text` so readers see either the old or the new file.

    The content goes to a temp file in the same directory, is fsynced, and is
    then moved over the target with os.replace.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistenceError(
            "Failed to write file",
            details={"path": str(path)},
            cause=exc,
        ) from exc


def read_text(path: Path) -> str | None:
    """Return file content, or None if the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise PersistenceError(
            "Failed to read file",
            details={"path": str(path)},
            cause=exc,
        ) from exc


def _lock_fd(fd: int) -> None:
    try:
        if sys.platform == "win32":
            os.lseek(fd, 0, os.SEEK_SET)
            msvcrt.locking(fd, msvcrt.LK_LOCK, 1)
        else:
            fcntl.flock(fd, fcntl.LOCK_EX)
    except OSError as exc:
        raise PersistenceError("Failed to acquire file lock", cause=exc) from exc


def _unlock_fd(fd: int) -> None:
    if sys.platform == "win32":
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(fd, fcntl.LOCK_UN)
