from .base import AppError, ApplicationError, ErrorCode, ErrorLevel
from .errors import (
    BadRequestError,
    ConfigurationError,
    ExtractionError,
    MethodNotAllowedError,
    NotFoundError,
    RateLimitError,
    StorageError,
    UnauthorizedError,
    ValidationError,
    parse_error,
    to_app_error,
)
