"""Public configuration exports for fuzzydrive."""

from __future__ import annotations

from .context import AppContext
from .settings import (
    PLACEHOLDER_CLIENT_ID,
    PLACEHOLDER_CLIENT_SECRET,
    AppConfig,
    load_config,
    require_client_credentials,
    require_target_folders,
    save_config,
)

__all__ = [
    "AppContext",
    "AppConfig",
    "PLACEHOLDER_CLIENT_ID",
    "PLACEHOLDER_CLIENT_SECRET",
    "load_config",
    "save_config",
    "require_client_credentials",
    "require_target_folders",
]
