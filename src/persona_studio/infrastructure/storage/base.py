"""Blob storage interface."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class StoredBlob:
    path: str
    size: int


@dataclass(frozen=True)
class BlobEntry:
    """Listing entry for one stored object."""

    name: str
    created_at: str | None = None


@runtime_checkable
class BlobStorage(Protocol):
    """Key to bytes store holding persisted personas."""

    async def put(self, key: str, data: bytes, no_overwrite: bool = True) -> StoredBlob:
        """Store ``data`` under ``key``; an existing key is an error when ``no_overwrite``."""
        ...

    async def get(self, key: str) -> bytes | None:
        """Stored bytes, or None when the key does not exist."""
        ...

    async def list(self, limit: int, offset: int) -> list[BlobEntry]:
        """One page of entries, newest first."""
        ...

    async def delete(self, key: str) -> None: ...
