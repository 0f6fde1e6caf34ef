"""Public error exports for docgateway."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
