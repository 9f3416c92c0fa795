"""Centralized logging setup with Logfire integration.

Every log entry is rendered as a single line::

    [2024-05-01T12:00:00.000000Z] INFO: GET /functions/list-personas {"function": "list-personas"}

followed, for entries carrying an ``error=`` value, by `` Error: <message>`` and
the stack trace when one is available.
"""

import json
import logging
import sys
import traceback
from collections.abc import Mapping
from typing import Any

import logfire
import structlog
from structlog.types import EventDict, Processor, WrappedLogger
from structlog.typing import FilteringBoundLogger

LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Keys consumed by the renderer itself, never echoed in the JSON context
_RESERVED = ("event", "level", "timestamp", "error_message", "error_stack")


def normalize_error(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Turn an ``error=`` value of any shape into a message and optional stack."""
    if "error" not in event_dict:
        return event_dict

    error = event_dict.pop("error")
    stack: str | None = None
    if isinstance(error, BaseException):
        message = str(error) or type(error).__name__
        if error.__traceback__ is not None:
            stack = "".join(traceback.format_exception(error)).rstrip()
        event_dict["error_type"] = type(error).__name__
    elif isinstance(error, Mapping) and "message" in error:
        message = str(error["message"])
        raw_stack = error.get("stack")
        stack = str(raw_stack) if raw_stack else None
    else:
        message = str(error)

    event_dict["error_message"] = message
    if stack:
        event_dict["error_stack"] = stack
    return event_dict


def render_line(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> str:
    """Final renderer producing the one-line format."""
    timestamp = event_dict.get("timestamp", "")
    level = str(event_dict.get("level", "info")).upper()
    line = f"[{timestamp}] {level}: {event_dict.get('event', '')}"

    context = {key: value for key, value in event_dict.items() if key not in _RESERVED}
    if context:
        line += " " + json.dumps(context, default=str)

    if "error_message" in event_dict:
        line += f" Error: {event_dict['error_message']}"
        if event_dict.get("error_stack"):
            line += f"\n{event_dict['error_stack']}"
    return line


def build_processors(use_logfire: bool = False) -> list[Processor]:
    """Processor chain shared by structlog and standard-library records."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        normalize_error,
    ]
    if use_logfire:
        # Must come before the final renderer
        processors.append(logfire.StructlogProcessor())
    return processors


def setup_logging(level: str = "info", use_logfire: bool = False) -> None:
    """Configure application-wide logging.

    Args:
        level: Minimum level (debug, info, warning or error). Error entries always
            pass since error is the highest threshold that can be configured.
        use_logfire: Forward entries to Logfire as well. Requires
            ``logfire.configure`` to have been called.
    """
    min_level = LEVELS.get(level.lower(), logging.INFO)
    processors = build_processors(use_logfire)

    structlog.configure(
        processors=[*processors, render_line],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(),
        # Loggers are rebuilt per call so a reconfigured level takes effect everywhere
        cache_logger_on_first_use=False,
    )

    # Route standard-library records (httpx, uvicorn, ...) through the same chain
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, render_line],
        foreign_pre_chain=processors,
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(min_level)


def get_logger(name: str | None = None, **initial_values: Any) -> FilteringBoundLogger:
    """Get a structured logger instance.

    Args:
        name: The name of the logger (usually __name__)
        initial_values: Context bound to every entry of this logger

    Returns:
        A configured structlog logger instance
    """
    if name:
        initial_values.setdefault("logger_name", name)
    return structlog.get_logger(**initial_values)
