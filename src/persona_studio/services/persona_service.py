"""Persona endpoint orchestration.

Each operation validates its input, makes one collaborator call and shapes
the result into a response contract.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from persona_studio.core.errors import StorageError, ValidationError
from persona_studio.core.logging import get_logger
from persona_studio.domain.models import (
    GetPersonaQuery,
    GetPersonaResponse,
    ListPersonasResponse,
    Pagination,
    Persona,
    PersonaInput,
    SavePersonaPayload,
    SavePersonaResponse,
    is_usable_extraction,
    normalize_extraction,
    is_valid_persona_id,
)
from persona_studio.domain.models.utils import utc_now_iso
from persona_studio.domain.validation import validate_input
from persona_studio.infrastructure.extraction import PersonaExtractor
from persona_studio.infrastructure.repositories import PersonaRepository

logger = get_logger(__name__)

UNUSABLE_EXTRACTION = "Failed to extract valid persona data"


@dataclass(frozen=True)
class PersonaExtracted:
    persona: Persona


@dataclass(frozen=True)
class ExtractionRejected:
    """Extraction ran but produced nothing usable. Not an error response."""

    reason: str


ExtractionOutcome = PersonaExtracted | ExtractionRejected


class PersonaService:
    def __init__(
        self,
        repository: PersonaRepository,
        extractor: PersonaExtractor,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.repository = repository
        self.extractor = extractor
        self.clock = clock

    async def process(self, raw_body: Any) -> ExtractionOutcome:
        """Extract a persona from raw text and links.

        Raises:
            ValidationError: If the body is not a valid PersonaInput
            ExtractionError: If the extraction collaborator fails
        """
        request = validate_input(PersonaInput, raw_body)
        logger.info(
            "Input validated successfully",
            text_block_count=len(request.textBlocks),
            link_count=len(request.links),
        )

        extracted = await self.extractor.extract(request.textBlocks, request.links)
        if not is_usable_extraction(extracted):
            keys = sorted(extracted) if isinstance(extracted, dict) else None
            logger.error("Extracted persona failed validation", keys=keys)
            return ExtractionRejected(UNUSABLE_EXTRACTION)

        fields = {key: value for key, value in extracted.items() if key not in ("id", "metadata", "raw_data")}
        fields, dropped = normalize_extraction(fields)
        if dropped:
            logger.warning("Dropped extracted fields that do not fit the persona", fields=dropped)
        persona = Persona.model_validate(
            {
                **fields,
                "metadata": {
                    "created_at": self.clock(),
                    "source_text_blocks": len(request.textBlocks),
                    "source_links": len(request.links),
                },
                "raw_data": {"textBlocks": request.textBlocks, "links": request.links},
            }
        )

        logger.info(
            "Persona extracted and structured successfully",
            name=persona.name,
            traits=len(persona.traits),
            interests=len(persona.interests),
        )
        return PersonaExtracted(persona)

    async def save(self, raw_body: Any) -> SavePersonaResponse:
        payload = validate_input(SavePersonaPayload, raw_body)
        persona_id, blob = await self.repository.save(payload.persona)
        return SavePersonaResponse(success=True, persona_id=persona_id, storage_path=blob.path)

    async def get(self, query: Mapping[str, Any]) -> GetPersonaResponse:
        """Fetch one saved persona.

        Raises:
            ValidationError: If ``persona_id`` is missing or malformed (400)
            NotFoundError: If no persona is stored under the id (404)
        """
        request = validate_input(GetPersonaQuery, {"persona_id": query.get("persona_id")})
        raw = await self.repository.get_raw(request.persona_id)
        try:
            persona = Persona.model_validate(raw)
        except PydanticValidationError as e:
            raise StorageError(f"Stored persona is malformed: {request.persona_id}") from e
        logger.info("Persona retrieved successfully", persona_id=request.persona_id, name=persona.name)
        return GetPersonaResponse(success=True, persona=persona)

    async def list(self, query: Mapping[str, Any]) -> ListPersonasResponse:
        pagination = validate_input(Pagination, dict(query))
        personas = await self.repository.list(limit=pagination.limit, offset=pagination.offset)
        # The store does not report a grand total
        total = len(personas) + pagination.offset
        logger.info("Personas listed successfully", count=len(personas), total=total)
        return ListPersonasResponse(success=True, personas=personas, total=total)

    async def delete(self, persona_id: str) -> None:
        if not is_valid_persona_id(persona_id):
            raise ValidationError("persona_id: Invalid persona ID format")
        await self.repository.delete(persona_id)
