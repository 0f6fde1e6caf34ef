"""Google Drive document provider."""

from __future__ import annotations

from .auth import DRIVE_READONLY_SCOPE, DriveAuth, OAuthClient
from .controller import DriveController, DriveItem
from .provider import DRIVE_AUTHORITY, DriveDocumentProvider

__all__ = [
    "DRIVE_AUTHORITY",
    "DRIVE_READONLY_SCOPE",
    "DriveAuth",
    "OAuthClient",
    "DriveController",
    "DriveItem",
    "DriveDocumentProvider",
]
