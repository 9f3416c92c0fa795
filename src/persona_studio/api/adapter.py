"""Translation between platform invocation events and normalized requests.

This is the only module aware of the serverless event shape. Everything above
it works with ``NormalizedRequest`` and ``NormalizedResponse``.
"""

import base64
import binascii
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from fastapi.datastructures import URL, Headers, QueryParams
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from persona_studio.core.errors import BadRequestError

SYNTHETIC_BASE = "https://example.com"


class PlatformEvent(BaseModel):
    """Serverless HTTP event (Netlify Functions and AWS Lambda proxy shapes)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    method: str = Field(default="GET", validation_alias=AliasChoices("httpMethod", "method"))
    path: str = Field(default="/", validation_alias=AliasChoices("path", "rawPath"))
    raw_query: str = Field(default="", validation_alias=AliasChoices("rawQuery", "rawQueryString", "raw_query"))
    query_parameters: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("queryStringParameters", "query_parameters")
    )
    headers: dict[str, Any] = Field(default_factory=dict)
    body: str | None = None
    is_base64_encoded: bool = Field(default=False, validation_alias=AliasChoices("isBase64Encoded", "is_base64_encoded"))

    @model_validator(mode="before")
    @classmethod
    def lift_http_context(cls, data: Any) -> Any:
        # API Gateway v2 carries the method under requestContext.http
        if isinstance(data, Mapping) and "httpMethod" not in data and "method" not in data:
            http = (data.get("requestContext") or {}).get("http") or {}
            if "method" in http:
                data = {**data, "method": http["method"]}
        if isinstance(data, Mapping) and data.get("headers") is None:
            data = {**data, "headers": {}}
        return data

    def query_string(self) -> str:
        if self.raw_query:
            return self.raw_query.lstrip("?")
        if self.query_parameters:
            return urlencode({key: value for key, value in self.query_parameters.items() if value is not None})
        return ""

    def decoded_body(self) -> bytes:
        if self.body is None:
            return b""
        if self.is_base64_encoded:
            try:
                return base64.b64decode(self.body, validate=True)
            except binascii.Error as e:
                raise BadRequestError("Request body is not valid base64") from e
        return self.body.encode("utf-8")


@dataclass(frozen=True)
class NormalizedRequest:
    method: str
    url: URL
    headers: Headers
    body: bytes = b""

    @property
    def path(self) -> str:
        return self.url.path

    @property
    def query_params(self) -> QueryParams:
        return QueryParams(self.url.query)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass
class NormalizedResponse:
    status: int
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


def event_to_request(event: Mapping[str, Any] | PlatformEvent) -> NormalizedRequest:
    """Build a normalized request from a platform event.

    Header values that are not strings (multi-value leftovers, nulls) are dropped.
    """
    parsed = event if isinstance(event, PlatformEvent) else PlatformEvent.model_validate(event)
    path = parsed.path if parsed.path.startswith("/") else f"/{parsed.path}"
    query = parsed.query_string()
    url = URL(f"{SYNTHETIC_BASE}{path}" + (f"?{query}" if query else ""))
    headers = Headers(headers={key: value for key, value in parsed.headers.items() if isinstance(value, str)})
    return NormalizedRequest(
        method=parsed.method.upper(),
        url=url,
        headers=headers,
        body=parsed.decoded_body(),
    )


def response_to_platform(response: NormalizedResponse) -> dict[str, Any]:
    """Platform reply shape: status code, headers and the body as text."""
    return {
        "statusCode": response.status,
        "headers": dict(response.headers),
        "body": response.body or "",
    }
