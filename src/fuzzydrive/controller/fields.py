"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = "id,name,webViewLink,modifiedTime,mimeType,parents"

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

METADATA_FIELDS: str = "id,name,mimeType,webViewLink"

ABOUT_FIELDS: str = "user"

PAGE_SIZE: int = 1000
