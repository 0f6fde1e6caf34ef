"""Read-only Google Drive API controller (internal use only)."""

from __future__ import annotations

import io
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from docgateway.errors import (
    GatewayError,
    HttpErrorInfo,
    ProviderIOError,
    RateLimitError,
    map_http_error,
)

from .auth import DriveAuth, OAuthClient
from .fields import FILE_FIELDS, LIST_FIELDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


@dataclass(slots=True)
class DriveItem:
    """Subset of Drive file metadata the provider needs."""

    file_id: str
    name: str
    mime_type: str
    parents: list[str] = field(default_factory=list)
    size: Optional[int] = None
    trashed: bool = False


class DriveController:
    """
    Drive API controller.

    Notes:
        - The Drive `service` object is NOT exposed.
        - Shared drives are always included.
    """

    def __init__(self, auth: DriveAuth) -> None:
        self._retry_policy = _RetryPolicy()
        self._service = OAuthClient(auth).build_drive_service()

    @classmethod
    def from_service(cls, service: Any) -> "DriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._retry_policy = _RetryPolicy()
        obj._service = service
        return obj

    def get(self, file_id: str) -> DriveItem:
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            supportsAllDrives=True,
        )
        return _file_dict_to_item(self._execute(req.execute))

    def list_children(self, parent_id: str) -> list[DriveItem]:
        """All non-trashed children of `parent_id`, following page tokens."""
        items: list[DriveItem] = []
        page_token: Optional[str] = None
        query = f"'{_escape_query(parent_id)}' in parents and trashed=false"

        while True:
            req = self._service.files().list(
                q=query,
                fields=LIST_FIELDS,
                pageToken=page_token,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
            )
            data = self._execute(req.execute)
            items.extend(_file_dict_to_item(f) for f in data.get("files", []))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return items

    def download_bytes(self, file_id: str) -> bytes:
        """Download a file's media fully into memory."""
        from googleapiclient.http import MediaIoBaseDownload

        req = self._service.files().get_media(fileId=file_id, supportsAllDrives=True)
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, req)
        done = False
        while not done:
            _, done = self._execute(downloader.next_chunk)
        return buffer.getvalue()

    # ----------------------------
    # Internals
    # ----------------------------
    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = _map_exception(exc)
                if _should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug("Drive request failed (%s); retrying in %.1fs", mapped, delay)
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ProviderIOError("Unexpected retry loop termination")


def _should_retry(exc: GatewayError) -> bool:
    if isinstance(exc, RateLimitError):
        return True
    if isinstance(exc, ProviderIOError):
        status_code = exc.details.get("status_code")
        return status_code is None or (isinstance(status_code, int) and 500 <= status_code <= 599)
    return False


def _map_exception(exc: Exception) -> GatewayError:
    from googleapiclient.errors import HttpError

    if isinstance(exc, GatewayError):
        return exc
    if isinstance(exc, HttpError):
        return map_http_error(_http_error_to_info(exc), cause=exc)
    if isinstance(exc, (OSError, TimeoutError)):
        return ProviderIOError("Network error", cause=exc)
    return ProviderIOError("Drive API error", details={"status_code": -1}, cause=exc)


def _escape_query(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _file_dict_to_item(data: dict[str, Any]) -> DriveItem:
    file_id = data.get("id")
    name = data.get("name")
    mime_type = data.get("mimeType")
    parents = data.get("parents")

    size = None
    raw_size = data.get("size")
    if isinstance(raw_size, str) and raw_size.isdigit():
        size = int(raw_size)
    elif isinstance(raw_size, int):
        size = raw_size

    return DriveItem(
        file_id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=list(parents) if isinstance(parents, list) else [],
        size=size,
        trashed=bool(data.get("trashed", False)),
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    resp = getattr(exc, "resp", None)
    status_code = getattr(resp, "status", None)
    reason = getattr(resp, "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
