"""In-process blob storage used for local runs and tests."""

from dataclasses import dataclass

from persona_studio.core.base import StorageErrorDetails
from persona_studio.core.errors import StorageError
from persona_studio.domain.models.utils import utc_now_iso

from .base import BlobEntry, StoredBlob


@dataclass
class _Blob:
    data: bytes
    created_at: str
    sequence: int


class InMemoryBlobStorage:
    def __init__(self, bucket: str = "personas"):
        self.bucket = bucket
        self._blobs: dict[str, _Blob] = {}
        self._sequence = 0

    async def put(self, key: str, data: bytes, no_overwrite: bool = True) -> StoredBlob:
        if no_overwrite and key in self._blobs:
            raise StorageError(
                f"Object already exists: {key}",
                status_code=409,
                details=StorageErrorDetails(
                    source="InMemoryBlobStorage",
                    operation="put",
                    service_name="memory",
                    bucket=self.bucket,
                    object_path=key,
                ),
            )
        self._sequence += 1
        self._blobs[key] = _Blob(data=data, created_at=utc_now_iso(), sequence=self._sequence)
        return StoredBlob(path=key, size=len(data))

    async def get(self, key: str) -> bytes | None:
        blob = self._blobs.get(key)
        return blob.data if blob else None

    async def list(self, limit: int, offset: int) -> list[BlobEntry]:
        # Insertion order breaks ties between identical timestamps
        ordered = sorted(self._blobs.items(), key=lambda item: item[1].sequence, reverse=True)
        return [BlobEntry(name=key, created_at=blob.created_at) for key, blob in ordered[offset : offset + limit]]

    async def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def __len__(self) -> int:
        return len(self._blobs)
