"""Contract validation entry points and input sanitizers."""

import re
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from persona_studio.core.base import ValidationErrorDetails
from persona_studio.core.errors import ValidationError
from persona_studio.domain.models.base import url_adapter

M = TypeVar("M", bound=BaseModel)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def format_issues(error: PydanticValidationError) -> list[str]:
    """One ``path: message`` string per violation, in pydantic's order."""
    return [".".join(str(part) for part in issue["loc"]) + f": {issue['msg']}" for issue in error.errors()]


def validate_input(model: type[M], data: Any) -> M:
    """Validate untyped data against a contract model.

    Every violation is reported, joined as ``"path: message; path: message"``.

    Raises:
        ValidationError: If the data does not satisfy the contract
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        issues = format_issues(e)
        raise ValidationError(
            "; ".join(issues),
            details=ValidationErrorDetails(source=model.__name__, operation="validate_input", issues=issues),
        ) from e


def sanitize_string(value: str) -> str:
    """Trim, then strip ASCII control characters."""
    return _CONTROL_CHARS.sub("", value.strip())


def sanitize_url(value: str) -> str:
    """Normalized form of ``value``.

    Raises:
        ValidationError: If ``value`` is not a URL
    """
    try:
        return str(url_adapter.validate_python(value))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid URL: {value}") from e
