"""Per-invocation context: where configuration and state live."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

APP_DIR_NAME: str = "fuzzy-drive-search"
HOME_ENV_VAR: str = "FUZZYDRIVE_HOME"


@dataclass(slots=True, frozen=True)
class AppContext:
    """
    Paths for one invocation.

    Built once (usually with `from_environment`) and passed to every component
    instead of each one reading the environment on its own.
    """

    config_dir: Path

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        platform: str = sys.platform,
    ) -> AppContext:
        env = os.environ if environ is None else environ

        override = env.get(HOME_ENV_VAR, "").strip()
        if override:
            return cls(config_dir=Path(override).expanduser())

        if platform == "win32" and env.get("APPDATA"):
            return cls(config_dir=Path(env["APPDATA"]) / APP_DIR_NAME)

        xdg = env.get("XDG_CONFIG_HOME", "").strip()
        base = Path(xdg) if xdg else Path.home() / ".config"
        return cls(config_dir=base / APP_DIR_NAME)

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.json"

    @property
    def token_path(self) -> Path:
        return self.config_dir / "tokens.json"

    @property
    def snapshot_path(self) -> Path:
        return self.config_dir / "drive_files.json"

    def ensure_dirs(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
