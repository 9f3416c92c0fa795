"""Handler pipeline shared by every endpoint.

``create_handler`` wraps a business function that takes a ``NormalizedRequest``
and returns a ``NormalizedResponse``. The wrapper answers CORS preflight itself,
times and logs the invocation, and converts every failure into a JSON error
body. No exception leaves a wrapped handler.
"""

import inspect
import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import BaseModel

from persona_studio.core.base import ApplicationError
from persona_studio.core.errors import BadRequestError, MethodNotAllowedError, to_app_error
from persona_studio.core.logging import RequestLogger, bind_log_context, clear_log_context
from persona_studio.domain.validation import sanitize_string

from .adapter import NormalizedRequest, NormalizedResponse, event_to_request, response_to_platform

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS, PUT, DELETE",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Content-Type": "application/json",
}

BusinessHandler = Callable[[NormalizedRequest], NormalizedResponse | Awaitable[NormalizedResponse]]
PlatformHandler = Callable[..., Awaitable[dict[str, Any]]]


def json_response(data: Any, status: int = 200, headers: Mapping[str, str] | None = None) -> NormalizedResponse:
    """JSON response carrying the CORS header set."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return NormalizedResponse(
        status=status,
        body=json.dumps(data),
        headers={**(headers or {}), **CORS_HEADERS},
    )


def error_response(error: ApplicationError) -> NormalizedResponse:
    return json_response(error.to_response(), error.status_code)


def handle_options() -> NormalizedResponse:
    """Preflight answer: 204, CORS headers, no body."""
    return NormalizedResponse(status=204, body=None, headers=dict(CORS_HEADERS))


def parse_json_body(request: NormalizedRequest) -> Any:
    """Decoded JSON body; an empty body reads as ``{}``.

    Raises:
        BadRequestError: If the body is not valid JSON
    """
    text = request.text().strip()
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError as e:
        raise BadRequestError("Invalid JSON in request body") from e


def get_query_param(request: NormalizedRequest, name: str) -> str | None:
    return request.query_params.get(name)


def get_query_params(request: NormalizedRequest) -> dict[str, str]:
    return dict(request.query_params)


def require_method(request: NormalizedRequest, *allowed: str) -> None:
    """Reject any method other than ``allowed`` (OPTIONS is always let through).

    Raises:
        MethodNotAllowedError: 405 naming the accepted methods
    """
    if request.method not in allowed and request.method != "OPTIONS":
        raise MethodNotAllowedError(" or ".join(allowed))


def _with_cors(result: Any) -> NormalizedResponse:
    if not isinstance(result, NormalizedResponse):
        return json_response(result)
    return NormalizedResponse(status=result.status, body=result.body, headers={**result.headers, **CORS_HEADERS})


def create_handler(business_fn: BusinessHandler, function_name: str | None = None) -> PlatformHandler:
    """Wrap ``business_fn`` into a platform handler.

    Args:
        business_fn: Sync or async function handling one normalized request
        function_name: Label used in logs and correlation ids

    Returns:
        ``async handler(event, context=None) -> {statusCode, headers, body}``
    """
    name = function_name or business_fn.__name__

    async def handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
        request_log = RequestLogger(name)
        bind_log_context(function=name, request_id=request_log.request_id)
        try:
            try:
                request = event_to_request(event)
                request_log.log_request(
                    sanitize_string(request.method), sanitize_string(request.path), request.headers, request.body
                )

                if request.method == "OPTIONS":
                    return response_to_platform(handle_options())

                result = business_fn(request)
                if inspect.isawaitable(result):
                    result = await result

                response = _with_cors(result)
                request_log.log_response(response.status, response.body)
                return response_to_platform(response)
            except Exception as e:
                app_error = to_app_error(e)
                request_log.log_error(e, status=app_error.status_code, code=app_error.code.value)
                return response_to_platform(error_response(app_error))
        finally:
            clear_log_context()

    handler.__name__ = f"{name.replace('-', '_')}_handler"
    handler.__doc__ = business_fn.__doc__
    return handler
