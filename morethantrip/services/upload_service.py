"""
More Than Trip Core — Upload Service (Ingest Orchestrator)
============================================================

What:  Sequences a photo upload across the blob store and the metadata store.
Why:   The one place that decides what happens when either store fails.
How:   Receives both stores at construction; ingest() runs
       key → blob write → locator → metadata insert.
Who:   Built per request by morethantrip.dependencies; called by
       POST /api/photos.

Orchestration Flow:
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Route   │───▶│ derive key  │───▶│  BlobStore   │───▶│MetadataStore │
    │ (parsed) │    │ ts_filename │    │  .store()    │    │.insert_photo │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

    Blob write fails     → BlobStoreFailure; no row is written
    Metadata write fails → MetadataStoreFailure; the blob stays in the
                           bucket with nothing pointing at it (orphan)
    Deadline during the  → cancellation propagates; the orphan is logged
    metadata write         first

Consistency gap:
    The two writes are not a transaction and there is no compensating
    delete. An orphan is logged at ERROR with its key and locator so a
    reconciliation sweep can find it. No retries happen at this layer.

Concurrency:
    The service holds no mutable state; each call uses only its own
    arguments. The stores it wraps are shared and responsible for their own
    thread/connection safety.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional

from morethantrip.exceptions import (
    BlobStoreFailure,
    ForeignKeyViolationError,
    MetadataFailureReason,
    MetadataStoreFailure,
)
from morethantrip.schemas.photo import PhotoMetadataIn
from morethantrip.services.storage_keys import derive_storage_key
from morethantrip.services.stores import BlobStore, MetadataStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    photo_id: uuid.UUID
    img_url: str
    storage_key: str


class UploadService:
    """
    Stateless orchestrator for the photo ingest workflow.

    Args:
        blob_store: where the bytes go
        metadata_store: where the photo row goes
        clock: wall-clock source in seconds (time.time by default; tests
               pass a fixed value to reproduce key collisions)
    """

    def __init__(
        self,
        blob_store: BlobStore,
        metadata_store: MetadataStore,
        clock: Callable[[], float] = time.time,
    ):
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.clock = clock

    async def ingest(
        self,
        payload: BinaryIO,
        declared_size: int,
        original_filename: Optional[str],
        metadata: PhotoMetadataIn,
        content_type: Optional[str] = None,
    ) -> IngestResult:
        """
        Store the photo bytes, then persist the metadata row pointing at them.

        Workflow Steps:
            1. Derive the storage key from the clock and the filename
            2. Write the bytes to the blob store → locator
            3. Insert the photo row with img_url = locator
            4. Return the locator, the key and the new photo id

        Raises:
            BlobStoreFailure: step 2 failed; nothing persisted, safe to retry
            MetadataStoreFailure: step 3 failed; the blob is orphaned
        """
        key = derive_storage_key(original_filename, now=self.clock())

        # ── Step 1: Blob write ────────────────────────────────────────────
        try:
            img_url = await self.blob_store.store(payload, declared_size, key, content_type)
        except asyncio.CancelledError:
            # The write may still land in the bucket after cancellation.
            logger.error("Blob write cancelled at deadline: key=%s", key)
            raise
        except Exception as e:
            logger.error("Blob write failed for key %s: %s", key, str(e))
            raise BlobStoreFailure(
                context={"storage_key": key, "error_type": type(e).__name__},
            ) from e

        if not img_url:
            raise BlobStoreFailure(
                message="The storage backend did not return a location for the photo.",
                context={"storage_key": key},
            )
        logger.info("Blob stored: key=%s url=%s", key, img_url)

        # ── Step 2: Metadata insert ───────────────────────────────────────
        try:
            photo_id = await self.metadata_store.insert_photo(metadata, img_url)
        except asyncio.CancelledError:
            # The upload deadline fired while the row was being written.
            logger.error(
                "Orphaned blob: key=%s url=%s (metadata insert cancelled at deadline)",
                key,
                img_url,
            )
            raise
        except ForeignKeyViolationError as e:
            logger.error(
                "Orphaned blob: key=%s url=%s (unknown region/trip/user reference)",
                key,
                img_url,
            )
            raise MetadataStoreFailure(
                message="The photo references a region, trip or user that does not exist.",
                reason=MetadataFailureReason.UNKNOWN_REFERENCE,
                orphaned_key=key,
                context={"img_url": img_url},
            ) from e
        except Exception as e:
            logger.error(
                "Orphaned blob: key=%s url=%s (metadata insert failed: %s)",
                key,
                img_url,
                type(e).__name__,
            )
            raise MetadataStoreFailure(
                reason=MetadataFailureReason.WRITE_FAILED,
                orphaned_key=key,
                context={"img_url": img_url, "error_type": type(e).__name__},
            ) from e

        logger.info("Photo %s ingested (%d bytes, key=%s)", photo_id, declared_size, key)
        return IngestResult(photo_id=photo_id, img_url=img_url, storage_key=key)
