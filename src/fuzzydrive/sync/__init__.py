"""Public sync exports for fuzzydrive."""

from __future__ import annotations

from .pipeline import SYNC_INTERVAL, RemoteLister, SyncPipeline, sync_is_due

__all__ = ["SyncPipeline", "RemoteLister", "SYNC_INTERVAL", "sync_is_due"]
