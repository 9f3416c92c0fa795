"""Shared building blocks for contract models."""

import re
from typing import Annotated, Any

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, StrictStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

PERSONA_ID_PATTERN = re.compile(r"^persona_[A-Za-z0-9_-]{12}$")

url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class ContractModel(BaseModel):
    """Base for every request/response contract.

    Unknown keys are dropped and field values are not coerced unless a field
    opts into it.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def is_valid_persona_id(value: Any) -> bool:
    """Whether ``value`` is a well-formed persona id. Never raises."""
    return isinstance(value, str) and PERSONA_ID_PATTERN.fullmatch(value) is not None


def is_valid_url(value: str) -> bool:
    try:
        url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _check_persona_id(value: str) -> str:
    if not value:
        raise PydanticCustomError("persona_id_required", "Persona ID required")
    if not is_valid_persona_id(value):
        raise PydanticCustomError("persona_id_format", "Invalid persona ID format")
    return value


def check_url(value: str) -> str:
    if not is_valid_url(value):
        raise PydanticCustomError("url_format", "Invalid URL format")
    return value


PersonaId = Annotated[StrictStr, AfterValidator(_check_persona_id)]


def max_items(limit: int, message: str) -> AfterValidator:
    """List length check with a caller supplied message."""

    def check(value: list) -> list:
        if len(value) > limit:
            raise PydanticCustomError("too_many_items", message)
        return value

    return AfterValidator(check)
