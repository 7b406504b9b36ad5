"""
More Than Trip Core — S3 Blob Store
=====================================

What:  BlobStore implementation backed by an S3-compatible bucket.
Why:   Photo bytes live in object storage; the database only keeps the locator.
How:   boto3 client created once per process; each put_object runs in a
       worker thread (asyncio.to_thread) so the event loop keeps serving
       other requests while the upload is in flight.
Who:   Built by morethantrip.dependencies and injected into UploadService.

Locator format:
    S3_PUBLIC_BASE_URL set   → {base}/{key}
    AWS_ENDPOINT_URL set     → {endpoint}/{bucket}/{key}   (MinIO, LocalStack)
    otherwise                → https://{bucket}.s3.amazonaws.com/{key}

Cancellation:
    When the upload deadline fires, the awaiting coroutine is cancelled but
    the worker thread keeps running put_object to completion. A late write
    is tolerated; nobody observes its result.
"""

import asyncio
import logging
from typing import Any, BinaryIO, Optional
from urllib.parse import quote

import boto3

from morethantrip.config import settings
from morethantrip.services.stores import BlobStore

logger = logging.getLogger(__name__)


def create_s3_client() -> Any:
    """Create an S3 client using the configured region/endpoint/credentials."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )


class S3BlobStore(BlobStore):
    """
    Stores photo bytes in one bucket.

    boto3 clients are thread-safe, so a single instance is shared by every
    request (see dependencies.get_blob_store).
    """

    def __init__(
        self,
        client: Any = None,
        bucket: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ):
        self._client = client if client is not None else create_s3_client()
        self.bucket = bucket or settings.s3_bucket
        self.endpoint_url = endpoint_url if endpoint_url is not None else settings.aws_endpoint_url
        self.public_base_url = (
            public_base_url if public_base_url is not None else settings.s3_public_base_url
        )
        logger.info("S3BlobStore initialized with bucket=%s", self.bucket)

    def object_url(self, key: str) -> str:
        """Build the public locator for `key` (see module docstring)."""
        quoted = quote(key)
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{quoted}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.amazonaws.com/{quoted}"

    async def store(
        self,
        payload: BinaryIO,
        size: int,
        key: str,
        content_type: Optional[str] = None,
    ) -> str:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": payload,
            "ContentLength": size,
        }
        if content_type:
            params["ContentType"] = content_type

        await asyncio.to_thread(self._client.put_object, **params)

        logger.info("Stored object %s in bucket %s (%d bytes)", key, self.bucket, size)
        return self.object_url(key)

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self.bucket)
            return True
        except Exception as e:
            logger.warning("S3 health check failed for bucket %s: %s", self.bucket, str(e))
            return False
