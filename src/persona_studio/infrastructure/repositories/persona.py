"""Persona persistence on top of blob storage."""

import json
import secrets

from persona_studio.core.base import StorageErrorDetails
from persona_studio.core.errors import NotFoundError, StorageError
from persona_studio.core.logging import get_logger
from persona_studio.domain.models import PERSONA_ID_PATTERN, Persona, PersonaSummary
from persona_studio.infrastructure.storage import BlobStorage, StoredBlob

logger = get_logger(__name__)

BLOB_SUFFIX = ".json"
PERSONA_PREFIX = "persona_"


def generate_persona_id() -> str:
    """``persona_`` plus 12 URL-safe random characters."""
    # 9 random bytes encode to exactly 12 base64url characters
    return PERSONA_PREFIX + secrets.token_urlsafe(9)


def blob_key(persona_id: str) -> str:
    return f"{persona_id}{BLOB_SUFFIX}"


def persona_id_from_key(key: str) -> str | None:
    """Persona id for a stored object name, or None for foreign objects."""
    if not key.endswith(BLOB_SUFFIX):
        return None
    candidate = key[: -len(BLOB_SUFFIX)]
    return candidate if PERSONA_ID_PATTERN.fullmatch(candidate) else None


class PersonaRepository:
    """Stores each persona as ``{id}.json``. Saved personas are never overwritten."""

    def __init__(self, storage: BlobStorage):
        self.storage = storage

    async def save(self, persona: Persona, persona_id: str | None = None) -> tuple[str, StoredBlob]:
        persona_id = persona_id or generate_persona_id()
        stored = persona.model_copy(update={"id": persona_id})
        data = json.dumps(stored.to_payload()).encode("utf-8")
        blob = await self.storage.put(blob_key(persona_id), data, no_overwrite=True)
        logger.info("Persona stored", persona_id=persona_id, path=blob.path, size=blob.size)
        return persona_id, blob

    async def get_raw(self, persona_id: str) -> dict:
        """Stored JSON for ``persona_id``.

        Raises:
            NotFoundError: If nothing is stored under the id
            StorageError: If the stored object is not a JSON object
        """
        data = await self.storage.get(blob_key(persona_id))
        if data is None:
            raise NotFoundError(
                f"Persona not found: {persona_id}",
                details={"source": "persona_repository", "operation": "get", "persona_id": persona_id},
            )
        try:
            raw = json.loads(data)
        except ValueError as e:
            raise StorageError(
                f"Stored persona is not valid JSON: {persona_id}",
                details=StorageErrorDetails(
                    source="persona_repository",
                    operation="get",
                    service_name="storage",
                    object_path=blob_key(persona_id),
                ),
            ) from e
        if not isinstance(raw, dict):
            raise StorageError(f"Stored persona is not an object: {persona_id}")
        return raw

    async def list(self, limit: int, offset: int) -> list[PersonaSummary]:
        entries = await self.storage.list(limit=limit, offset=offset)
        summaries = []
        for entry in entries:
            persona_id = persona_id_from_key(entry.name)
            if persona_id is None:
                continue
            # Listing does not open each object; the id doubles as the display name
            summaries.append(PersonaSummary(id=persona_id, name=persona_id, created_at=entry.created_at))
        summaries.sort(key=lambda summary: summary.created_at or "", reverse=True)
        return summaries

    async def delete(self, persona_id: str) -> None:
        await self.storage.delete(blob_key(persona_id))
        logger.info("Persona deleted", persona_id=persona_id)
