"""Structured logging module.

structlog renders every entry; logfire receives them too when configured.
"""

from .context import (
    bind_log_context,
    clear_log_context,
    get_log_context,
    update_log_context,
)
from .request import RequestLogger, body_preview, sanitize_body, sanitize_headers
from .setup import get_logger, setup_logging

__all__ = [
    "RequestLogger",
    # Context management
    "bind_log_context",
    # Redaction
    "body_preview",
    "clear_log_context",
    "get_log_context",
    # Setup
    "get_logger",
    "sanitize_body",
    "sanitize_headers",
    "setup_logging",
    "update_log_context",
]
