"""Document provider exports for docgateway."""

from __future__ import annotations

from .base import DocumentProvider
from .local_storage import EXTERNAL_STORAGE_AUTHORITY, LocalStorageProvider

__all__ = [
    "DocumentProvider",
    "EXTERNAL_STORAGE_AUTHORITY",
    "LocalStorageProvider",
]
