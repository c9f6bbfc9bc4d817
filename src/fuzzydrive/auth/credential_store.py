"""JSON persistence for the OAuth credential."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from fuzzydrive.errors import PersistenceError
from fuzzydrive.storage import atomic_write_text, file_lock, lock_path_for, read_text

from .credential import Credential

logger = logging.getLogger(__name__)


class CredentialStore:
    """Load and save the persisted credential record."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Credential]:
        text = read_text(self._path)
        if text is None:
            return None

        try:
            return Credential.from_dict(json.loads(text))
        except (ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(
                "Failed to load token file",
                details={"path": str(self._path)},
                cause=exc,
            ) from exc

    def save(self, credential: Credential) -> None:
        text = json.dumps(credential.to_dict(), indent=2)
        with file_lock(lock_path_for(self._path)):
            atomic_write_text(self._path, text)
        logger.info("Saved OAuth token to %s", self._path)
