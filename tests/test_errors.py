"""
Tests for the error taxonomy and failure classification.
"""

import pytest

from persona_studio.core import (
    ApplicationError,
    ErrorCode,
    ExtractionError,
    NotFoundError,
    RateLimitError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from persona_studio.core.errors import (
    FALLBACK_MESSAGE,
    BadRequestError,
    ConfigurationError,
    MethodNotAllowedError,
    parse_error,
    to_app_error,
)


def test_to_response_shape():
    """Every error renders the same four-key body."""
    error = NotFoundError("Persona not found: persona_abcdefghijkl")

    assert error.to_response() == {
        "success": False,
        "error": "Persona not found: persona_abcdefghijkl",
        "code": "NOT_FOUND",
        "statusCode": 404,
    }


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (ValidationError("bad"), 400, ErrorCode.VALIDATION_ERROR),
        (BadRequestError("bad"), 400, ErrorCode.BAD_REQUEST),
        (UnauthorizedError(), 401, ErrorCode.UNAUTHORIZED),
        (NotFoundError(), 404, ErrorCode.NOT_FOUND),
        (MethodNotAllowedError(), 405, ErrorCode.BAD_REQUEST),
        (RateLimitError(), 429, ErrorCode.RATE_LIMIT),
        (ExtractionError("boom"), 500, ErrorCode.EXTRACTION_ERROR),
        (StorageError("boom"), 500, ErrorCode.STORAGE_ERROR),
        (ConfigurationError("missing"), 500, ErrorCode.SERVER_ERROR),
        (ApplicationError("boom"), 500, ErrorCode.SERVER_ERROR),
    ],
)
def test_specialized_status_and_code(error, status, code):
    assert error.status_code == status
    assert error.code is code


def test_error_codes_are_closed_set():
    assert {code.value for code in ErrorCode} == {
        "VALIDATION_ERROR",
        "EXTRACTION_ERROR",
        "STORAGE_ERROR",
        "NOT_FOUND",
        "UNAUTHORIZED",
        "SERVER_ERROR",
        "BAD_REQUEST",
        "RATE_LIMIT",
    }


def test_collaborator_errors_keep_upstream_status():
    assert ExtractionError("slow down", status_code=429).status_code == 429
    assert StorageError("exists", status_code=409).to_response()["statusCode"] == 409


def test_method_not_allowed_message():
    assert MethodNotAllowedError("GET or POST").message == "Method not allowed. Use GET or POST."


def test_dict_details_become_error_details():
    error = NotFoundError("gone", details={"source": "repo", "operation": "get"})

    assert error.details.source == "repo"
    assert error.details.operation == "get"


def test_parse_error_variants():
    assert parse_error(RuntimeError("kaboom")) == "kaboom"
    assert parse_error(RuntimeError()) == "RuntimeError"
    assert parse_error("plain text") == "plain text"
    assert parse_error({"message": "from a dict"}) == "from a dict"
    assert parse_error({"detail": "no message key"}) == FALLBACK_MESSAGE
    assert parse_error(42) == FALLBACK_MESSAGE


def test_parse_error_object_with_message_attribute():
    class Rejection:
        message = "rejected upstream"

    assert parse_error(Rejection()) == "rejected upstream"


def test_application_errors_pass_through():
    original = RateLimitError("too many")

    assert to_app_error(original) is original


@pytest.mark.parametrize(
    ("message", "code", "status"),
    [
        ("HTTP 401 returned", ErrorCode.UNAUTHORIZED, 401),
        ("Request Unauthorized", ErrorCode.UNAUTHORIZED, 401),
        ("upstream said 404", ErrorCode.NOT_FOUND, 404),
        ("Object not found", ErrorCode.NOT_FOUND, 404),
        ("status 429", ErrorCode.RATE_LIMIT, 429),
        ("Rate limit reached", ErrorCode.RATE_LIMIT, 429),
        ("Anthropic overloaded", ErrorCode.EXTRACTION_ERROR, 500),
        ("Supabase bucket missing", ErrorCode.STORAGE_ERROR, 500),
        ("division by zero", ErrorCode.SERVER_ERROR, 500),
    ],
)
def test_to_app_error_classifies_by_message(message, code, status):
    converted = to_app_error(RuntimeError(message))

    assert converted.code is code
    assert converted.status_code == status
    assert converted.message == message


def test_to_app_error_checks_in_order():
    """Authorization wins over everything else mentioned in the same message."""
    converted = to_app_error(RuntimeError("supabase: 401 unauthorized, rate limit applies"))

    assert converted.code is ErrorCode.UNAUTHORIZED


def test_to_app_error_keeps_cause():
    original = KeyError("missing")

    converted = to_app_error(original)

    assert converted.__cause__ is original


def test_to_app_error_non_exception_values():
    assert to_app_error("nothing matched").code is ErrorCode.SERVER_ERROR
    assert to_app_error({"message": "not found anywhere"}).status_code == 404
    assert to_app_error(None).message == FALLBACK_MESSAGE


def test_to_app_error_default_code():
    converted = to_app_error(RuntimeError("odd"), default_code=ErrorCode.BAD_REQUEST)

    assert converted.code is ErrorCode.BAD_REQUEST
    assert converted.status_code == 500
