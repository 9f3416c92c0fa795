"""Request-scoped logging for diagnosing boundary failures.

Every entry written through a ``RequestLogger`` carries the same correlation
id. Sensitive headers and body fields are redacted before anything is logged.
"""

import json
import re
import secrets
import string
import time
from collections.abc import Mapping
from typing import Any

from persona_studio.core.errors import parse_error

from .setup import get_logger

SENSITIVE_HEADERS = ("authorization", "x-api-key", "cookie", "x-auth-token", "x-access-token")
SENSITIVE_FIELDS = ("password", "token", "secret", "api_key", "apikey")
REDACTED = "[REDACTED]"
PREVIEW_LIMIT = 500
SLOW_RESPONSE_MS = 3000

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
# Quoted values may be cut off by truncation, hence the optional closing quote
_SENSITIVE_PAIR = re.compile(
    r"""(["']?[\w.-]*(?:%s)[\w.-]*["']?\s*[:=]\s*)("[^"]*"?|'[^']*'?|[^\s&,;}\]]*)"""
    % "|".join(map(re.escape, SENSITIVE_FIELDS)),
    re.IGNORECASE,
)


def _matches(key: Any, needles: tuple[str, ...]) -> bool:
    lowered = str(key).lower()
    return any(needle in lowered for needle in needles)


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Copy of ``headers`` with credential-bearing values replaced."""
    if not headers:
        return {}
    return {key: REDACTED if _matches(key, SENSITIVE_HEADERS) else value for key, value in headers.items()}


def sanitize_body(value: Any) -> Any:
    """Recursively redact sensitive fields in nested mappings and sequences."""
    if isinstance(value, Mapping):
        return {
            key: REDACTED if _matches(key, SENSITIVE_FIELDS) else sanitize_body(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [sanitize_body(item) for item in value]
    return value


def redact_text(text: str) -> str:
    """Redact ``key: value`` and ``key=value`` pairs with sensitive keys in unparsed text.

    Covers truncated JSON and form-encoded bodies, which never reach
    ``sanitize_body``.
    """
    return _SENSITIVE_PAIR.sub(lambda match: f'{match.group(1)}"{REDACTED}"', text)


def body_preview(body: Any, limit: int = PREVIEW_LIMIT) -> str:
    """Redacted, truncated text form of a request or response body."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            text = json.dumps(sanitize_body(json.loads(body)), default=str)
        except ValueError:
            text = redact_text(body)
    else:
        text = json.dumps(sanitize_body(body), default=str)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def new_correlation_id(label: str) -> str:
    """``{label}-{epoch ms}-{9 random chars}``"""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    return f"{label}-{int(time.time() * 1000)}-{suffix}"


class RequestLogger:
    """Logger bound to one invocation of one endpoint."""

    def __init__(self, caller_label: str, endpoint: str | None = None):
        self.caller_label = caller_label
        self.endpoint = endpoint or caller_label
        self.request_id = new_correlation_id(caller_label)
        self._started = time.perf_counter()
        self._log = get_logger(__name__).bind(request_id=self.request_id, function=caller_label)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)

    def log_request(
        self,
        method: str,
        path: str,
        headers: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> None:
        entry: dict[str, Any] = {
            "method": method,
            "endpoint": self.endpoint,
            "headers": sanitize_headers(headers),
        }
        if body:
            entry["body_preview"] = body_preview(body)
        self._log.info(f"{method} {path}", **entry)

    def log_response(self, status: int, body: Any = None, duration_ms: int | None = None) -> None:
        duration = self.elapsed_ms() if duration_ms is None else duration_ms
        entry: dict[str, Any] = {"status": status, "duration": f"{duration}ms"}
        if body:
            entry["body_preview"] = body_preview(body)

        if duration > SLOW_RESPONSE_MS:
            self._log.warning(f"Slow response from {self.endpoint}", threshold=f"{SLOW_RESPONSE_MS}ms", **entry)
        self._log.debug("Handler completed successfully", **entry)

    def log_error(self, error: Any, status: int | None = None, **context: Any) -> None:
        self._log.error(
            f"Handler error: {parse_error(error)}",
            error=error,
            status=status,
            duration=f"{self.elapsed_ms()}ms",
            **sanitize_body(context),
        )

    def log_step(self, step: str, **data: Any) -> None:
        self._log.debug(step, step=step, **sanitize_body(data))
