"""Supabase Storage backed blob storage.

The Supabase client is synchronous; calls run in a worker thread so the event
loop is never blocked.
"""

import asyncio
import time
from typing import Any

from supabase import Client, create_client

from persona_studio.core.base import ErrorLevel, StorageErrorDetails
from persona_studio.core.config import Settings
from persona_studio.core.decorators import with_error_handling
from persona_studio.core.errors import StorageError
from persona_studio.core.logging import get_logger

from .base import BlobEntry, StoredBlob

logger = get_logger(__name__)


def _status_of(error: Exception) -> int | None:
    status = getattr(error, "status", None)
    if status is None and error.args and isinstance(error.args[0], dict):
        status = error.args[0].get("statusCode")
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def _message_of(error: Exception) -> str:
    message = getattr(error, "message", None)
    if message is None and error.args and isinstance(error.args[0], dict):
        message = error.args[0].get("message") or error.args[0].get("error")
    return str(message or error)


def _is_missing(error: Exception) -> bool:
    return _status_of(error) == 404 or "not found" in _message_of(error).lower()


def _is_duplicate(error: Exception) -> bool:
    message = _message_of(error).lower()
    return _status_of(error) == 409 or "duplicate" in message or "already exists" in message


def translate_storage_error(error: Exception) -> StorageError:
    """Typed StorageError for a failed Supabase call."""
    status = _status_of(error)
    if _is_duplicate(error):
        status = 409
    return StorageError(
        f"Supabase storage error: {_message_of(error)}",
        status_code=status if status and status >= 400 else 500,
        details=StorageErrorDetails(
            source="SupabaseBlobStorage",
            operation="storage_call",
            service_name="supabase",
            status_code=status,
        ),
    )


class SupabaseBlobStorage:
    """Personas stored as objects in one Supabase Storage bucket."""

    def __init__(self, settings: Settings, client: Client | None = None):
        self.settings = settings
        self.bucket = settings.personas_bucket
        self._client = client

    @property
    def client(self) -> Client:
        """Supabase client, created on first use and reused for the process lifetime.

        Raises:
            ConfigurationError: If the Supabase URL or service role key is missing
        """
        if self._client is None:
            self.settings.require("supabase_url", "supabase_service_role_key")
            logger.info("Creating Supabase client", bucket=self.bucket)
            self._client = create_client(self.settings.supabase_url, self.settings.supabase_service_role_key)
        return self._client

    def _objects(self) -> Any:
        return self.client.storage.from_(self.bucket)

    @with_error_handling(error_level=ErrorLevel.ERROR, translate=translate_storage_error)
    async def put(self, key: str, data: bytes, no_overwrite: bool = True) -> StoredBlob:
        started = time.perf_counter()
        file_options = {
            "content-type": "application/json",
            "upsert": "false" if no_overwrite else "true",
        }
        result = await asyncio.to_thread(self._objects().upload, key, data, file_options)
        path = getattr(result, "path", None) or key
        logger.debug(
            "Uploaded object",
            bucket=self.bucket,
            path=path,
            size=len(data),
            latency_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return StoredBlob(path=path, size=len(data))

    @with_error_handling(error_level=ErrorLevel.ERROR, translate=translate_storage_error)
    async def get(self, key: str) -> bytes | None:
        try:
            return await asyncio.to_thread(self._objects().download, key)
        except Exception as e:
            if _is_missing(e):
                return None
            raise

    @with_error_handling(error_level=ErrorLevel.ERROR, translate=translate_storage_error)
    async def list(self, limit: int, offset: int) -> list[BlobEntry]:
        options = {
            "limit": limit,
            "offset": offset,
            "sortBy": {"column": "created_at", "order": "desc"},
        }
        rows = await asyncio.to_thread(self._objects().list, None, options)
        return [BlobEntry(name=row["name"], created_at=row.get("created_at")) for row in rows or []]

    @with_error_handling(error_level=ErrorLevel.ERROR, translate=translate_storage_error)
    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._objects().remove, [key])
