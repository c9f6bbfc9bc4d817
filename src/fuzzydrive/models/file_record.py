"""Data model for indexed Drive files."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class FileRecord:
    """
    A non-folder Drive item that is a direct child of a configured folder.

    Notes:
        - `id` is unique within a snapshot.
        - `web_view_link` is "" when Drive did not return one.
        - `modified_time` is None when Drive returned an unparseable value.
    """

    id: str
    name: str
    web_view_link: str
    mime_type: str
    modified_time: Optional[datetime] = None
    parents: list[str] = field(default_factory=list)
