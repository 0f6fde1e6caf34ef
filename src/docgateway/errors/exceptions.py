"""Exception hierarchy and HTTP error mapping for docgateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GatewayError(Exception):
    """
    Base exception for docgateway.

    Attributes:
        code: Stable error code reported by the method dispatcher.
        details: Optional structured information (e.g., uri, HTTP status).
        cause: Optional original exception that triggered this error.
    """

    code: str = "gateway_error"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidUriError(GatewayError):
    """Raised when a resource identifier is blank, malformed or unroutable."""

    code = "invalid_uri"


class PermissionDeniedError(GatewayError):
    """Raised when no grant covers the requested document."""

    code = "permission_denied"


class UnsupportedOperationError(GatewayError):
    """Raised when a provider cannot perform the operation for this URI."""

    code = "unsupported_operation"


class NotFoundError(GatewayError):
    """Raised when a document does not exist."""

    code = "not_found"


class ProviderIOError(GatewayError):
    """Raised when the underlying storage fails (I/O, network, 5xx)."""

    code = "provider_io"


class AuthError(GatewayError):
    """Raised when OAuth authentication/refresh fails."""

    code = "auth_failed"


class RateLimitError(ProviderIOError):
    """Raised when the provider rate-limits requests (HTTP 429)."""

    code = "rate_limited"


class InvalidStateError(GatewayError):
    """Raised when the library is used in an invalid state."""

    code = "invalid_state"


class ListFailedError(GatewayError):
    """Raised when a folder cannot be resolved or listed."""

    code = "list_failed"


class PickerInProgressError(GatewayError):
    """Raised when a folder pick is requested while another is pending."""

    code = "picker_in_progress"


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to docgateway exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GatewayError:
    """
    Map a storage-backend HTTP error to a docgateway exception.

    Policy:
        - 400 -> InvalidUriError (the id the URI carries was rejected)
        - 401 -> AuthError
        - 403 -> PermissionDeniedError, but RateLimitError for rate reasons
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - otherwise -> ProviderIOError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidUriError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if info.reason and "ratelimit" in info.reason.lower():
            return RateLimitError(message, details=details, cause=cause)
        return PermissionDeniedError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ProviderIOError(message, details=details, cause=cause)
