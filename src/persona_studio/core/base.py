"""Base error classes and enums"""

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Self

from logfire.integrations.pydantic import PluginSettings
from pydantic import BaseModel, Field, field_serializer


class ErrorLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        """Convert ErrorLevel to logging level"""
        return {
            ErrorLevel.DEBUG: logging.DEBUG,
            ErrorLevel.INFO: logging.INFO,
            ErrorLevel.WARNING: logging.WARNING,
            ErrorLevel.ERROR: logging.ERROR,
            ErrorLevel.CRITICAL: logging.CRITICAL,
        }[self]


class ErrorCode(str, Enum):
    """Stable error codes surfaced in every error response body."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    # Extraction collaborator (language model) failures
    EXTRACTION_ERROR = "EXTRACTION_ERROR"
    # Storage collaborator (blob store) failures
    STORAGE_ERROR = "STORAGE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    SERVER_ERROR = "SERVER_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    RATE_LIMIT = "RATE_LIMIT"


class ErrorDetails(BaseModel, plugin_settings=PluginSettings(logfire={"record": "all"})):
    """Base model for structured error details"""

    source: str = Field(description="Component or module where the error occurred")
    operation: str = Field(description="Operation being performed when the error occurred")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When the error occurred")

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ValidationErrorDetails(ErrorDetails):
    """Details for contract validation failures"""

    issues: list[str] = Field(default_factory=list, description="Individual 'path: message' violations")


class ServiceErrorDetails(ErrorDetails):
    """Details for collaborator-related errors"""

    service_name: str = Field(description="Name of the collaborator that failed")
    status_code: int | None = Field(None, description="Upstream status code if known")
    latency_ms: float | None = Field(None, description="Call duration in milliseconds")


class StorageErrorDetails(ServiceErrorDetails):
    """Details for storage-related errors"""

    bucket: str | None = Field(None, description="Storage bucket name")
    object_path: str | None = Field(None, description="Path to the object in storage")


class AIServiceErrorDetails(ServiceErrorDetails):
    """Details for extraction model errors"""

    model_name: str | None = Field(None, description="Model identifier")
    max_tokens: int | None = Field(None, description="Maximum tokens allowed")
    temperature: float | None = Field(None, description="Temperature setting used")


class ApplicationError(Exception):
    """Base class for all application errors.

    Carries the (message, status_code, code) triple that every error response
    is built from.
    """

    default_status_code: int = 500
    default_code: ErrorCode = ErrorCode.SERVER_ERROR
    default_level: ErrorLevel = ErrorLevel.ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: ErrorCode | None = None,
        level: ErrorLevel | None = None,
        details: ErrorDetails | dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.code = code or self.default_code
        self.level = level or self.default_level

        if details is None:
            self.details = ErrorDetails(source="unknown", operation="unknown")
        elif isinstance(details, dict):
            extra = dict(details)
            source = extra.pop("source", "unknown")
            operation = extra.pop("operation", "unknown")
            self.details = ErrorDetails(source=source, operation=operation, **extra)
        else:
            self.details = details

        super().__init__(message)

    @classmethod
    def with_details(cls, message: str, details: ErrorDetails, **kwargs: Any) -> Self:
        """Create an error with specific details model"""
        return cls(message=message, details=details, **kwargs)

    def to_response(self) -> dict[str, Any]:
        """Error body returned to clients."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code.value,
            "statusCode": self.status_code,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code}, code={self.code.value})"


AppError = ApplicationError
