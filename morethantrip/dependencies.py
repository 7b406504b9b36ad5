"""
More Than Trip Core — Dependency Wiring
=========================================

What:  FastAPI dependencies that build the upload workflow's collaborators.
Why:   UploadService receives its stores at construction; nothing inside it
       reaches for a module-level instance. Tests swap any of these through
       app.dependency_overrides.

Lifetimes:
    get_blob_store      → one S3BlobStore per process (boto3 client is thread-safe)
    get_metadata_store  → one SqlPhotoStore per request, bound to the request session
    get_upload_service  → one UploadService per request
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.database import get_db_session
from morethantrip.services.photo_store import SqlPhotoStore
from morethantrip.services.s3_blob_store import S3BlobStore
from morethantrip.services.stores import BlobStore, MetadataStore
from morethantrip.services.upload_service import UploadService


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    return S3BlobStore()


def get_metadata_store(db: AsyncSession = Depends(get_db_session)) -> MetadataStore:
    return SqlPhotoStore(db)


def get_upload_service(
    blob_store: BlobStore = Depends(get_blob_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> UploadService:
    return UploadService(blob_store=blob_store, metadata_store=metadata_store)
