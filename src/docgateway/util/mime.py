from __future__ import annotations

import mimetypes
from typing import Optional

DIRECTORY_MIME: str = "vnd.android.document/directory"
DRIVE_FOLDER_MIME: str = "application/vnd.google-apps.folder"

# Google-apps documents have no binary media; export is out of scope.
GOOGLE_APP_PREFIX: str = "application/vnd.google-apps."


def is_directory_mime(mime_type: Optional[str]) -> bool:
    return mime_type in (DIRECTORY_MIME, DRIVE_FOLDER_MIME)


def is_google_app(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.startswith(GOOGLE_APP_PREFIX)  # type: ignore[union-attr]


def is_download_disallowed(mime_type: Optional[str]) -> bool:
    """Folders and Google-apps documents cannot be opened as a byte stream."""
    return is_directory_mime(mime_type) or is_google_app(mime_type)


def guess_mime_type(name: str) -> Optional[str]:
    """
    Guess a file's MIME type from its extension.

    Returns None when the extension is unknown, matching providers that
    report no type for such files.
    """
    mime, _ = mimetypes.guess_type(name, strict=False)
    return mime
