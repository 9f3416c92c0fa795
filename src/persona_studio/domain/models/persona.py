"""Persona contracts: extraction input, the persona record and endpoint payloads."""

from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    StringConstraints,
    field_validator,
    model_serializer,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from .base import ContractModel, PersonaId, check_url, max_items

MAX_TEXT_BLOCKS = 50
MAX_LINKS = 50

TextBlock = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=5000)]
Link = Annotated[str, StringConstraints(strict=True, max_length=2048), AfterValidator(check_url)]

# Fields the extraction result must carry as lists to be usable
REQUIRED_LIST_FIELDS = ("traits", "interests", "skills", "values")
LIST_FIELDS = (*REQUIRED_LIST_FIELDS, "goals", "challenges", "relationships")


class PersonaInput(ContractModel):
    """Raw material a persona is extracted from."""

    textBlocks: Annotated[list[TextBlock], max_items(MAX_TEXT_BLOCKS, "Maximum 50 text blocks allowed")]
    links: Annotated[list[Link], max_items(MAX_LINKS, "Maximum 50 links allowed")] = Field(default_factory=list)

    @field_validator("textBlocks")
    @classmethod
    def require_content(cls, blocks: list[str]) -> list[str]:
        if not any(block.strip() for block in blocks):
            raise PydanticCustomError("empty_text_blocks", "At least one non-empty text block required")
        return blocks


class PersonaMetadata(ContractModel):
    """Provenance recorded when a persona is produced."""

    created_at: StrictStr | None = None
    source_text_blocks: StrictInt | None = None
    source_links: StrictInt | None = None


class RawData(ContractModel):
    """The inputs a persona was extracted from, kept verbatim."""

    textBlocks: list[StrictStr]
    links: list[StrictStr]


class Persona(ContractModel):
    """Structured profile of a person.

    Every list field is always present. ``id`` exists only once the persona has
    been saved and is omitted from the serialized form until then.
    """

    id: PersonaId | None = None
    name: StrictStr | None = None
    age: StrictInt | StrictFloat | None = None
    occupation: StrictStr | None = None
    background: StrictStr = ""
    traits: list[StrictStr] = Field(default_factory=list)
    interests: list[StrictStr] = Field(default_factory=list)
    skills: list[StrictStr] = Field(default_factory=list)
    values: list[StrictStr] = Field(default_factory=list)
    communication_style: StrictStr | None = None
    personality_type: StrictStr | None = None
    goals: list[StrictStr] = Field(default_factory=list)
    challenges: list[StrictStr] = Field(default_factory=list)
    relationships: list[StrictStr] = Field(default_factory=list)
    metadata: PersonaMetadata | None = None
    raw_data: RawData | None = None

    @model_serializer(mode="wrap")
    def _drop_missing_id(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if data.get("id") is None:
            data.pop("id", None)
        return data

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict as returned to clients and written to storage."""
        return self.model_dump(mode="json")


def is_usable_extraction(result: Any) -> bool:
    """Whether an extraction result is worth turning into a persona.

    Needs a name or a background, and the core list fields present as lists.
    """
    if not isinstance(result, dict):
        return False
    if not result.get("name") and not result.get("background"):
        return False
    return all(isinstance(result.get(field), list) for field in REQUIRED_LIST_FIELDS)


def normalize_extraction(fields: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Fit a usable extraction to ``Persona`` instead of rejecting it.

    Null list fields become empty lists. Fields that still fail validation
    are dropped so their defaults apply.

    Returns:
        The cleaned fields and the sorted names of the dropped ones
    """
    cleaned = {key: [] if key in LIST_FIELDS and value is None else value for key, value in fields.items()}
    try:
        Persona.model_validate(cleaned)
    except PydanticValidationError as e:
        dropped = sorted({str(issue["loc"][0]) for issue in e.errors() if issue["loc"]})
        return {key: value for key, value in cleaned.items() if key not in dropped}, dropped
    return cleaned, []


class SavePersonaPayload(ContractModel):
    persona: Persona


class GetPersonaQuery(ContractModel):
    persona_id: PersonaId

    @field_validator("persona_id", mode="before")
    @classmethod
    def absent_as_empty(cls, value: Any) -> Any:
        # An absent query parameter arrives as None
        return "" if value is None else value


class PersonaSummary(ContractModel):
    """One entry of the persona listing."""

    id: StrictStr
    name: StrictStr
    created_at: StrictStr | None = None


class ProcessPersonaResponse(ContractModel):
    success: bool
    persona: Persona | None = None
    error: str | None = None


class SavePersonaResponse(ContractModel):
    success: bool
    persona_id: PersonaId
    storage_path: StrictStr


class GetPersonaResponse(ContractModel):
    success: bool
    persona: Persona


class ListPersonasResponse(ContractModel):
    success: bool
    personas: list[PersonaSummary]
    total: int
