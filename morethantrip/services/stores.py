"""
More Than Trip Core — Storage Collaborator Interfaces
=======================================================

What:  Abstract contracts for the two stores the upload workflow talks to.
Why:   UploadService receives these at construction, so tests can hand it
       in-memory fakes and production hands it S3 + Postgres.
How:   Concrete implementations inherit and implement the abstract methods:
       - BlobStore     → S3BlobStore (services/s3_blob_store.py)
       - MetadataStore → SqlPhotoStore (services/photo_store.py)

Contracts:
    BlobStore.store(payload, size, key) → locator
        Durable write under a caller-supplied key. Must be safe to call
        concurrently from independent requests.

    MetadataStore.insert_photo(record) → photo id
        Single-row insert. Must raise ForeignKeyViolationError when a
        region/trip/user reference does not exist, and DatabaseError for
        anything else.
"""

import uuid
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from morethantrip.schemas.photo import PhotoMetadataIn


class BlobStore(ABC):
    """Object storage for photo bytes."""

    @abstractmethod
    async def store(
        self,
        payload: BinaryIO,
        size: int,
        key: str,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Write `size` bytes read from `payload` under `key`.

        Returns:
            The locator (URL) the object can be fetched from. Never empty.

        Raises:
            Any exception on failure; UploadService wraps it in
            BlobStoreFailure.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability probe used by GET /health."""
        ...


class MetadataStore(ABC):
    """Relational store for photo metadata rows."""

    @abstractmethod
    async def insert_photo(self, metadata: PhotoMetadataIn, img_url: str) -> uuid.UUID:
        """
        Insert one photo row carrying `img_url` as its locator.

        Returns:
            The identifier generated for the new row.

        Raises:
            ForeignKeyViolationError: region_id, trip_id or user_id is unknown
            DatabaseError: any other failure
        """
        ...
