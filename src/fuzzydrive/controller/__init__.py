"""Drive API controller exports for fuzzydrive."""

from __future__ import annotations

from .drive_controller import DriveController, ListPage, probe_credential

__all__ = ["DriveController", "ListPage", "probe_credential"]
