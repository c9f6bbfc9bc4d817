"""Google Drive API controller: folder listings, metadata and liveness."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from fuzzydrive.auth import Credential
from fuzzydrive.errors import (
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    RemoteFetchError,
    map_http_error,
)

from .fields import ABOUT_FIELDS, LIST_FIELDS, METADATA_FIELDS, PAGE_SIZE

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


@dataclass(frozen=True)
class ListPage:
    """One page of a folder listing (raw Drive file dicts)."""

    items: list[dict[str, Any]] = field(default_factory=list)
    next_page_token: Optional[str] = None


class DriveController:
    """
    Drive v3 calls used by the sync pipeline.

    Notes:
        - The Drive `service` object is NOT exposed.
        - Shared drives are included in every listing.
        - 429, 5xx and network errors are retried with exponential backoff.
    """

    def __init__(self, credential: Credential) -> None:
        self._retry_policy = _RetryPolicy()
        self._service = _build_drive_service(credential)

    @classmethod
    def from_service(cls, service: Any) -> "DriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._retry_policy = _RetryPolicy()
        obj._service = service
        return obj

    # ----------------------------
    # Public API
    # ----------------------------
    def list_children(self, folder_id: str, page_token: Optional[str] = None) -> ListPage:
        """
        Fetch one page of the folder's direct, non-trashed children.

        Raises:
            RemoteFetchError: if the request fails after retries.
        """
        req = self._service.files().list(
            q=_build_parent_query(folder_id),
            fields=LIST_FIELDS,
            pageSize=PAGE_SIZE,
            pageToken=page_token,
            corpora="allDrives",
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        )
        data = self._execute(req.execute)
        files = data.get("files") or []
        next_token = data.get("nextPageToken")
        return ListPage(
            items=[f for f in files if isinstance(f, dict)],
            next_page_token=next_token if isinstance(next_token, str) and next_token else None,
        )

    def get_metadata(self, file_id: str) -> dict[str, Any]:
        """Return id, name, mimeType and webViewLink for one item."""
        req = self._service.files().get(
            fileId=file_id,
            fields=METADATA_FIELDS,
            supportsAllDrives=True,
        )
        return self._execute(req.execute)

    def probe_liveness(self) -> bool:
        """Return True if the current access token is accepted by Drive."""
        try:
            self._service.about().get(fields=ABOUT_FIELDS).execute()
        except Exception as exc:
            logger.debug("Liveness probe rejected: %s", exc)
            return False
        return True

    # ----------------------------
    # Internals
    # ----------------------------
    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.info("Drive request failed (%s); retrying in %.1fs", mapped, delay)
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise RemoteFetchError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, (RateLimitError, NetworkError)):
            return True
        if type(exc) is RemoteFetchError:
            status_code = exc.details.get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        try:
            from googleapiclient.errors import HttpError
        except Exception:  # pragma: no cover
            HttpError = None  # type: ignore[assignment]

        if HttpError is not None and isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return RemoteFetchError("Drive API error", cause=exc)


def probe_credential(credential: Credential) -> bool:
    """Liveness probe used by CredentialManager."""
    try:
        controller = DriveController(credential)
    except RemoteFetchError as exc:
        logger.info("Could not build Drive service for probe: %s", exc)
        return False
    return controller.probe_liveness()


def _build_drive_service(credential: Credential):
    try:
        from google.oauth2.credentials import Credentials
        from googleapiclient.discovery import build
    except Exception as exc:  # pragma: no cover
        raise RemoteFetchError(
            "google-api-python-client is not available",
            details={"hint": "Install google-api-python-client and google-auth"},
            cause=exc,
        ) from exc

    creds = Credentials(token=credential.access_token)
    try:
        return build("drive", "v3", credentials=creds, cache_discovery=False)
    except Exception as exc:
        raise RemoteFetchError("Failed to build Drive service", cause=exc) from exc


def _build_parent_query(folder_id: str) -> str:
    escaped = folder_id.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}' in parents and trashed=false"


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
            err = payload.get("error", {})
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]
        except (ValueError, AttributeError, UnicodeDecodeError):
            pass

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
