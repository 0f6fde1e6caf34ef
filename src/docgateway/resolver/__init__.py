"""Public resolver exports for docgateway."""

from __future__ import annotations

from .content_resolver import (
    FLAG_GRANT_PERSISTABLE_URI_PERMISSION,
    FLAG_GRANT_PREFIX_URI_PERMISSION,
    FLAG_GRANT_READ_URI_PERMISSION,
    FLAG_GRANT_WRITE_URI_PERMISSION,
    ContentResolver,
)
from .permission_store import PermissionStore

__all__ = [
    "ContentResolver",
    "PermissionStore",
    "FLAG_GRANT_READ_URI_PERMISSION",
    "FLAG_GRANT_WRITE_URI_PERMISSION",
    "FLAG_GRANT_PERSISTABLE_URI_PERMISSION",
    "FLAG_GRANT_PREFIX_URI_PERMISSION",
]
