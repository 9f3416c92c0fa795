"""Specific error types for Persona Studio and conversion of arbitrary failures."""

from collections.abc import Mapping
from typing import Any

from .base import (
    ApplicationError,
    ErrorCode,
    ErrorDetails,
    ErrorLevel,
    ServiceErrorDetails,
    ValidationErrorDetails,
)

FALLBACK_MESSAGE = "An unexpected error occurred"


class ValidationError(ApplicationError):
    """Input failed a contract schema."""

    default_status_code = 400
    default_code = ErrorCode.VALIDATION_ERROR
    default_level = ErrorLevel.WARNING

    def __init__(self, message: str, details: ValidationErrorDetails | dict | None = None):
        super().__init__(message=message, details=details)


class BadRequestError(ApplicationError):
    """Request could not be read at all (e.g. malformed JSON)."""

    default_status_code = 400
    default_code = ErrorCode.BAD_REQUEST
    default_level = ErrorLevel.WARNING

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message=message, details=details)


class MethodNotAllowedError(ApplicationError):
    """HTTP method not accepted by the endpoint."""

    default_status_code = 405
    default_code = ErrorCode.BAD_REQUEST
    default_level = ErrorLevel.WARNING

    def __init__(self, allowed: str = "POST"):
        self.allowed = allowed
        super().__init__(message=f"Method not allowed. Use {allowed}.")


class NotFoundError(ApplicationError):
    default_status_code = 404
    default_code = ErrorCode.NOT_FOUND
    default_level = ErrorLevel.WARNING

    def __init__(self, message: str = "Resource not found", details: ErrorDetails | dict | None = None):
        super().__init__(message=message, details=details)


class UnauthorizedError(ApplicationError):
    default_status_code = 401
    default_code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", details: ErrorDetails | dict | None = None):
        super().__init__(message=message, details=details)


class RateLimitError(ApplicationError):
    """Rate limiting errors."""

    default_status_code = 429
    default_code = ErrorCode.RATE_LIMIT
    default_level = ErrorLevel.WARNING

    def __init__(self, message: str = "Rate limit exceeded", details: ServiceErrorDetails | None = None):
        super().__init__(message=message, details=details)


class ExtractionError(ApplicationError):
    """Failure reported by the extraction collaborator."""

    default_code = ErrorCode.EXTRACTION_ERROR

    def __init__(self, message: str, status_code: int = 500, details: ServiceErrorDetails | None = None):
        super().__init__(message=message, status_code=status_code, details=details)


class StorageError(ApplicationError):
    """Failure reported by the storage collaborator."""

    default_code = ErrorCode.STORAGE_ERROR

    def __init__(self, message: str, status_code: int = 500, details: ServiceErrorDetails | None = None):
        super().__init__(message=message, status_code=status_code, details=details)


class ConfigurationError(ApplicationError):
    default_code = ErrorCode.SERVER_ERROR
    default_level = ErrorLevel.CRITICAL

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message=message, details=details)


def parse_error(error: Any) -> str:
    """Pull a human readable message out of any raised or rejected value."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    if isinstance(error, str):
        return error
    if isinstance(error, Mapping):
        message = error.get("message")
        if isinstance(message, str):
            return message
    else:
        message = getattr(error, "message", None)
        if isinstance(message, str):
            return message
    return FALLBACK_MESSAGE


def to_app_error(error: Any, default_code: ErrorCode = ErrorCode.SERVER_ERROR) -> ApplicationError:
    """Convert anything into an ApplicationError.

    Application errors pass through untouched. Everything else is classified by
    substring matching on its message. This is a best-effort heuristic meant for
    opaque third-party failures only: a message that merely mentions "not found"
    in passing will still become a 404.
    """
    if isinstance(error, ApplicationError):
        return error

    message = parse_error(error)
    lowered = message.lower()

    converted: ApplicationError
    if "401" in message or "unauthorized" in lowered:
        converted = UnauthorizedError(message)
    elif "404" in message or "not found" in lowered:
        converted = NotFoundError(message)
    elif "429" in message or "rate limit" in lowered:
        converted = RateLimitError(message)
    elif "anthropic" in lowered:
        converted = ExtractionError(message)
    elif "supabase" in lowered:
        converted = StorageError(message)
    else:
        converted = ApplicationError(message, status_code=500, code=default_code)

    if isinstance(error, BaseException):
        converted.__cause__ = error
    return converted
