"""Public model exports for docgateway."""

from __future__ import annotations

from .document import UNKNOWN_LENGTH, DocumentDescriptor, DocumentNode, PermissionGrant
from .results import MethodResult, ResultStatus

__all__ = [
    "UNKNOWN_LENGTH",
    "DocumentNode",
    "DocumentDescriptor",
    "PermissionGrant",
    "MethodResult",
    "ResultStatus",
]
