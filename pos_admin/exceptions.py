"""
Centralized exception hierarchy for the POS admin dashboard.

Provides specific exception types for the failures a page can hit while
talking to the POS backend, and maps each of them to the message shown to
the operator.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Base Exception
# =============================================================================


class PosAdminError(RuntimeError):
    """
    Base exception for all POS admin errors.

    Attributes:
        message: Human-readable error message.
        detail: Additional error details (optional).
        error_code: Machine-readable error code.
        request_id: Unique identifier for the request (optional).
    """

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        error_code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.error_code = error_code or self._default_error_code()
        self.request_id = request_id or self._generate_request_id()

    def _default_error_code(self) -> str:
        """Generate default error code from class name."""
        return f"pos_admin_{self.__class__.__name__.lower()}"

    def _generate_request_id(self) -> str:
        return str(uuid.uuid4())

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable payload."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        if self.request_id:
            result["request_id"] = self.request_id
        return result

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def log(self, level: int = logging.ERROR) -> None:
        """Log the exception with structured data."""
        logger.log(
            level,
            self.message,
            extra={
                "error_code": self.error_code,
                "detail": self.detail,
                "request_id": self.request_id,
                "exception_type": self.__class__.__name__,
            },
        )


# =============================================================================
# Input Validation Errors
# =============================================================================


class ValidationError(PosAdminError):
    """
    Raised when form input validation fails.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        detail: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.field = field
        full_message = f"{field}: {message}" if field else message
        super().__init__(
            full_message,
            detail=detail,
            error_code="validation_error",
            request_id=request_id,
        )


class MissingRequiredFieldError(ValidationError):
    """Raised when a required form field is empty."""

    def __init__(
        self,
        field_name: str,
        *,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            message="Missing required field",
            field=field_name,
            detail=f"Field '{field_name}' is required",
            request_id=request_id,
        )


class InvalidDateRangeError(ValidationError):
    """Raised when a custom report range is incomplete or reversed."""

    def __init__(
        self,
        message: str,
        *,
        start_date: str | None = None,
        end_date: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            message,
            detail=f"{start_date or '?'} .. {end_date or '?'}",
            request_id=request_id,
        )


# =============================================================================
# Backend API Errors
# =============================================================================


class ExternalAPIError(PosAdminError):
    """
    Base class for backend API errors.
    """

    def __init__(
        self,
        message: str,
        *,
        service: str | None = None,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        detail_parts = []
        if service:
            detail_parts.append(f"Service: {service}")
        if status_code:
            detail_parts.append(f"Status: {status_code}")
        detail = "; ".join(detail_parts) if detail_parts else None
        super().__init__(
            message,
            detail=detail,
            error_code="external_api_error",
            request_id=request_id,
        )


class APIError(ExternalAPIError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        method: str | None = None,
        path: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.method = method
        self.path = path
        super().__init__(
            message,
            service="pos-backend",
            status_code=status_code,
            request_id=request_id,
        )
        if method and path:
            self.detail = f"{method} {path} -> {status_code}"
        self.error_code = "api_error"


class AuthenticationError(ExternalAPIError):
    """Raised when the backend rejects the credentials or the session token."""

    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        status_code: int | None = 401,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            service="pos-backend",
            status_code=status_code,
            request_id=request_id,
        )
        self.error_code = "authentication_error"


class PermissionDeniedError(AuthenticationError):
    """Raised on 403 responses and when a non-admin tries to sign in."""

    def __init__(
        self,
        message: str = "Permission denied",
        *,
        status_code: int | None = 403,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, request_id=request_id)
        self.error_code = "permission_denied"


class APITimeoutError(ExternalAPIError):
    """Raised when a backend request times out."""

    def __init__(
        self,
        service: str,
        *,
        timeout_seconds: float | None = None,
        request_id: str | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        detail = f"Timeout after {timeout_seconds}s" if timeout_seconds else None
        super().__init__(
            message=f"Request to {service} timed out",
            service=service,
            request_id=request_id,
        )
        self.error_code = "api_timeout"
        if detail:
            self.detail = detail


class APIConnectionError(ExternalAPIError):
    """Raised when the backend cannot be reached."""

    def __init__(
        self,
        service: str,
        *,
        reason: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.reason = reason
        detail = reason if reason else "Could not establish connection"
        super().__init__(
            message=f"Connection to {service} failed",
            service=service,
            request_id=request_id,
        )
        self.error_code = "api_connection_error"
        self.detail = detail


class UploadError(ExternalAPIError):
    """Raised when an image upload succeeds but returns no usable URL."""

    def __init__(
        self,
        message: str,
        *,
        received_keys: list[str] | None = None,
        request_id: str | None = None,
    ) -> None:
        self.received_keys = received_keys or []
        super().__init__(
            message,
            service="pos-backend",
            request_id=request_id,
        )
        self.error_code = "upload_error"
        self.detail = f"Received keys: {', '.join(self.received_keys) or 'null'}"


# =============================================================================
# Auth Token Errors
# =============================================================================


class InvalidTokenError(PosAdminError):
    """Raised when a stored bearer token cannot be decoded."""

    def __init__(
        self,
        reason: str,
        *,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "Invalid token",
            detail=reason,
            error_code="invalid_token",
            request_id=request_id,
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PosAdminError):
    """
    Raised when configuration is invalid or missing.
    """

    def __init__(
        self,
        message: str,
        *,
        setting_name: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.setting_name = setting_name
        detail = f"Missing or invalid setting: {setting_name}" if setting_name else None
        super().__init__(
            message,
            detail=detail,
            error_code="configuration_error",
            request_id=request_id,
        )


# =============================================================================
# Operator Messages
# =============================================================================


def user_message(exc: Exception, fallback: str = "Terjadi kesalahan. Silakan coba lagi.") -> str:
    """
    Text to show in the blocking alert for a failed action.

    Backend-provided messages win, then our own messages; anything else
    gets the fallback so stack details never reach the operator.
    """
    if isinstance(exc, APIError):
        return exc.message or fallback
    if isinstance(exc, (APITimeoutError, APIConnectionError)):
        return "Tidak dapat terhubung ke server. Periksa koneksi Anda."
    if isinstance(exc, PosAdminError):
        return exc.message
    logger.error(
        "Unhandled exception",
        extra={
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )
    return fallback
