"""Blob storage backends."""

from .base import BlobEntry, BlobStorage, StoredBlob
from .memory import InMemoryBlobStorage

__all__ = ["BlobEntry", "BlobStorage", "InMemoryBlobStorage", "StoredBlob"]
