"""
More Than Trip Core — Upload Service Unit Tests
=================================================

What:  Tests for UploadService.ingest, the blob-then-metadata workflow.
How:   In-memory stores from conftest sharing one call log, so the order of
       store calls is observable.

What we test:
    ✅ Success: locator from the blob store lands on the metadata row
    ✅ Blob write happens before the metadata insert
    ✅ Blob failure: no metadata insert, BlobStoreFailure
    ✅ Metadata failure: exactly one orphaned blob, MetadataStoreFailure
    ✅ Foreign-key failure reported as reason=unknown_reference
    ✅ No retries on either failure
    ✅ Deadline during the metadata insert: orphan logged, cancellation propagates
    ✅ Same filename in the same second overwrites the previous blob
"""

import asyncio
import io
import logging

import pytest

from morethantrip.exceptions import (
    BlobStoreFailure,
    DatabaseError,
    ForeignKeyViolationError,
    MetadataFailureReason,
    MetadataStoreFailure,
    UploadErrorKind,
)
from morethantrip.services.upload_service import UploadService

FIXED_NOW = 1700000000.25


def fixed_clock():
    return FIXED_NOW


class TestIngestSuccess:

    @pytest.mark.asyncio
    async def test_returns_locator_and_id(self, blob_store, metadata_store, photo_metadata):
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        result = await service.ingest(io.BytesIO(b"jpegbytes"), 9, "beach.jpg", photo_metadata)

        assert result.storage_key == "1700000000_beach.jpg"
        assert result.img_url == "https://test-photos.s3.amazonaws.com/1700000000_beach.jpg"
        assert blob_store.objects == {"1700000000_beach.jpg": b"jpegbytes"}
        row = metadata_store.rows[result.photo_id]
        assert row["img_url"] == result.img_url
        assert row["place"] == "Copacabana"
        assert row["region_id"] == photo_metadata.region_id

    @pytest.mark.asyncio
    async def test_blob_write_precedes_metadata_write(self, call_log, blob_store, metadata_store, photo_metadata):
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)

        assert call_log == ["blob.store", "metadata.insert_photo"]

    @pytest.mark.asyncio
    async def test_incoming_metadata_is_not_mutated(self, blob_store, metadata_store, photo_metadata):
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)
        before = photo_metadata.model_dump()

        await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)

        assert photo_metadata.model_dump() == before

    @pytest.mark.asyncio
    async def test_same_filename_same_second_overwrites(self, blob_store, metadata_store, photo_metadata):
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        first = await service.ingest(io.BytesIO(b"first"), 5, "beach.jpg", photo_metadata)
        second = await service.ingest(io.BytesIO(b"second"), 6, "beach.jpg", photo_metadata)

        assert first.storage_key == second.storage_key
        assert first.img_url == second.img_url
        assert blob_store.objects[first.storage_key] == b"second"
        # Two rows now point at one object.
        assert len(metadata_store.rows) == 2


class TestIngestBlobFailure:

    @pytest.mark.asyncio
    async def test_no_metadata_written(self, call_log, blob_store, metadata_store, photo_metadata):
        blob_store.error = ConnectionError("bucket unreachable")
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        with pytest.raises(BlobStoreFailure) as exc_info:
            await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)

        assert exc_info.value.kind is UploadErrorKind.BLOB_STORE_FAILURE
        assert exc_info.value.context["storage_key"] == "1700000000_a.jpg"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert metadata_store.rows == {}
        assert call_log == ["blob.store"]

    @pytest.mark.asyncio
    async def test_empty_locator_is_a_blob_failure(self, blob_store, metadata_store, photo_metadata):
        async def store_without_locator(*args, **kwargs):
            return ""

        blob_store.store = store_without_locator
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        with pytest.raises(BlobStoreFailure):
            await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)
        assert metadata_store.rows == {}


class TestIngestMetadataFailure:

    @pytest.mark.asyncio
    async def test_leaves_exactly_one_orphan(self, call_log, blob_store, metadata_store, photo_metadata):
        metadata_store.error = DatabaseError(message="connection reset")
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        with pytest.raises(MetadataStoreFailure) as exc_info:
            await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)

        error = exc_info.value
        assert error.kind is UploadErrorKind.METADATA_STORE_FAILURE
        assert error.reason is MetadataFailureReason.WRITE_FAILED
        assert error.orphaned_key == "1700000000_a.jpg"
        assert list(blob_store.objects) == ["1700000000_a.jpg"]
        assert metadata_store.rows == {}
        # One attempt each; nothing retried, nothing deleted.
        assert call_log == ["blob.store", "metadata.insert_photo"]

    @pytest.mark.asyncio
    async def test_unknown_reference_reason(self, blob_store, metadata_store, photo_metadata):
        metadata_store.error = ForeignKeyViolationError()
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        with pytest.raises(MetadataStoreFailure) as exc_info:
            await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)

        assert exc_info.value.reason is MetadataFailureReason.UNKNOWN_REFERENCE
        assert exc_info.value.context["reason"] == "unknown_reference"
        assert len(blob_store.objects) == 1

    @pytest.mark.asyncio
    async def test_orphan_is_logged_with_key_and_locator(self, blob_store, metadata_store, photo_metadata, caplog):
        metadata_store.error = RuntimeError("boom")
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        with caplog.at_level(logging.ERROR, logger="morethantrip.services.upload_service"):
            with pytest.raises(MetadataStoreFailure):
                await service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata)

        orphan_lines = [r.getMessage() for r in caplog.records if "Orphaned blob" in r.getMessage()]
        assert len(orphan_lines) == 1
        assert "1700000000_a.jpg" in orphan_lines[0]
        assert "https://test-photos.s3.amazonaws.com/1700000000_a.jpg" in orphan_lines[0]

    @pytest.mark.asyncio
    async def test_deadline_during_insert_logs_orphan(self, blob_store, metadata_store, photo_metadata, caplog):
        async def slow_insert(metadata, img_url):
            await asyncio.sleep(5)

        metadata_store.insert_photo = slow_insert
        service = UploadService(blob_store, metadata_store, clock=fixed_clock)

        with caplog.at_level(logging.ERROR, logger="morethantrip.services.upload_service"):
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(
                    service.ingest(io.BytesIO(b"x"), 1, "a.jpg", photo_metadata), timeout=0.05
                )

        orphan_lines = [r.getMessage() for r in caplog.records if "Orphaned blob" in r.getMessage()]
        assert len(orphan_lines) == 1
        assert "1700000000_a.jpg" in orphan_lines[0]
        assert "https://test-photos.s3.amazonaws.com/1700000000_a.jpg" in orphan_lines[0]
        assert list(blob_store.objects) == ["1700000000_a.jpg"]
