"""docgateway public API."""

from __future__ import annotations

from docgateway.channel import (
    DOCUMENT_BROWSER_CHANNEL,
    URI_ACCESS_CHANNEL,
    GatewayBridge,
    MethodCall,
    MethodChannel,
)
from docgateway.config import GatewayConfig
from docgateway.errors import (
    AuthError,
    GatewayError,
    HttpErrorInfo,
    InvalidStateError,
    InvalidUriError,
    ListFailedError,
    NotFoundError,
    PermissionDeniedError,
    PickerInProgressError,
    ProviderIOError,
    RateLimitError,
    UnsupportedOperationError,
    map_http_error,
)
from docgateway.gateway import StorageAccessGateway
from docgateway.models import DocumentDescriptor, DocumentNode, MethodResult, PermissionGrant
from docgateway.picker import (
    RESULT_CANCELED,
    RESULT_OK,
    FolderPicker,
    PromptFolderPicker,
    StaticFolderPicker,
)
from docgateway.providers import DocumentProvider, LocalStorageProvider
from docgateway.resolver import ContentResolver, PermissionStore
from docgateway.util.uri import DocumentUri

__all__ = [
    # High-level
    "StorageAccessGateway",
    "GatewayConfig",
    "GatewayBridge",
    "MethodCall",
    "MethodChannel",
    "URI_ACCESS_CHANNEL",
    "DOCUMENT_BROWSER_CHANNEL",
    # Storage
    "ContentResolver",
    "PermissionStore",
    "DocumentProvider",
    "LocalStorageProvider",
    "FolderPicker",
    "PromptFolderPicker",
    "StaticFolderPicker",
    "RESULT_OK",
    "RESULT_CANCELED",
    # Models
    "DocumentUri",
    "DocumentNode",
    "DocumentDescriptor",
    "PermissionGrant",
    "MethodResult",
    # Errors
    "GatewayError",
    "InvalidUriError",
    "PermissionDeniedError",
    "UnsupportedOperationError",
    "NotFoundError",
    "ProviderIOError",
    "AuthError",
    "RateLimitError",
    "InvalidStateError",
    "ListFailedError",
    "PickerInProgressError",
    "HttpErrorInfo",
    "map_http_error",
]
