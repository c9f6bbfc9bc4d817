"""JSON configuration file: target folders and OAuth client credentials."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from fuzzydrive.errors import ConfigurationMissingError, PersistenceError
from fuzzydrive.storage import atomic_write_text, file_lock, lock_path_for, read_text

logger = logging.getLogger(__name__)

PLACEHOLDER_CLIENT_ID: str = "your_client_id_here"
PLACEHOLDER_CLIENT_SECRET: str = "your_client_secret_here"
DEFAULT_AUTH_TIMEOUT_SECONDS: float = 300.0


@dataclass(slots=True, frozen=True)
class AppConfig:
    target_folder_ids: list[str] = field(default_factory=list)
    google_client_id: str = PLACEHOLDER_CLIENT_ID
    google_client_secret: str = PLACEHOLDER_CLIENT_SECRET
    auth_timeout_seconds: float = DEFAULT_AUTH_TIMEOUT_SECONDS

    @property
    def has_client_credentials(self) -> bool:
        return (
            bool(self.google_client_id)
            and bool(self.google_client_secret)
            and self.google_client_id != PLACEHOLDER_CLIENT_ID
            and self.google_client_secret != PLACEHOLDER_CLIENT_SECRET
        )

    def with_overrides(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ) -> AppConfig:
        changes: dict[str, Any] = {}
        if client_id:
            changes["google_client_id"] = client_id
        if client_secret:
            changes["google_client_secret"] = client_secret
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_folder_ids": list(self.target_folder_ids),
            "google_client_id": self.google_client_id,
            "google_client_secret": self.google_client_secret,
            "auth_timeout_seconds": self.auth_timeout_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        if not isinstance(data, dict):
            raise TypeError("config root must be an object")

        folder_ids = data.get("target_folder_ids") or []
        if not isinstance(folder_ids, list) or not all(isinstance(x, str) for x in folder_ids):
            raise TypeError("target_folder_ids must be a list of strings")

        timeout = data.get("auth_timeout_seconds", DEFAULT_AUTH_TIMEOUT_SECONDS)
        return cls(
            target_folder_ids=[x.strip() for x in folder_ids if x.strip()],
            google_client_id=str(data.get("google_client_id") or PLACEHOLDER_CLIENT_ID),
            google_client_secret=str(
                data.get("google_client_secret") or PLACEHOLDER_CLIENT_SECRET
            ),
            auth_timeout_seconds=float(timeout),
        )


def load_config(path: Path) -> AppConfig:
    """
    Load the config file, creating one with placeholder values if missing.

    Raises:
        PersistenceError: if the file cannot be read, written or parsed.
    """
    text = read_text(path)
    if text is None:
        logger.info("Config file not found; writing defaults to %s", path)
        config = AppConfig()
        save_config(path, config)
        return config

    try:
        return AppConfig.from_dict(json.loads(text))
    except (ValueError, TypeError) as exc:
        raise PersistenceError(
            "Config file is invalid",
            details={"path": str(path)},
            cause=exc,
        ) from exc


def save_config(path: Path, config: AppConfig) -> None:
    text = json.dumps(config.to_dict(), indent=2)
    with file_lock(lock_path_for(path)):
        atomic_write_text(path, text)
    logger.info("Saved config to %s", path)


def require_client_credentials(config: AppConfig, path: Path) -> None:
    if not config.has_client_credentials:
        raise ConfigurationMissingError(
            "Google API client id/secret are not configured. Create an OAuth client "
            "in Google Cloud Console (Drive API enabled) and set google_client_id and "
            f"google_client_secret in {path}, or pass --client-id/--client-secret to init.",
            details={"path": str(path)},
        )


def require_target_folders(config: AppConfig, path: Path) -> None:
    if not config.target_folder_ids:
        raise ConfigurationMissingError(
            "No target folders are configured. Add Drive folder ids (the last part of "
            "https://drive.google.com/drive/folders/<id>) to target_folder_ids in "
            f"{path}.",
            details={"path": str(path)},
        )
