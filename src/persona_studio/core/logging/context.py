"""Logging context utilities for structured logging.

Request-scoped values (function name, correlation id) are kept in structlog's
contextvars so every entry emitted while a request is handled carries them.
"""

from typing import Any

import structlog


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return dict(structlog.contextvars.get_contextvars())


def bind_log_context(**values: Any) -> None:
    """Add values to the logging context for the rest of this request."""
    structlog.contextvars.bind_contextvars(**values)


def update_log_context(key: str, value: Any) -> None:
    """Update a single key in the logging context."""
    structlog.contextvars.bind_contextvars(**{key: value})


def clear_log_context() -> None:
    """Clear the current logging context."""
    structlog.contextvars.clear_contextvars()
