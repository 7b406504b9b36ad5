"""
More Than Trip Core — Photo Routes
====================================

What:  POST /api/photos (upload) plus photo reads, edits, tags and likes.
Why:   The upload handler is the HTTP edge of the ingest workflow: it turns
       a multipart request into a validated ingest call under a deadline.
How:   Parses and validates here, delegates to UploadService / PhotoService,
       and lets the global exception handlers in main.py shape the errors.

Upload Request Flow:
    1. Client sends multipart/form-data with a 'file' part and a 'metadata'
       part holding JSON: {"coords", "description", "place",
       "region_id", "trip_id", "user_id"}
    2. Missing 'file', empty or oversized file        → 400, no store touched
    3. Missing 'metadata' or metadata that fails JSON
       or schema validation                           → 400, no store touched
    4. UploadService.ingest() under UPLOAD_TIMEOUT_SECONDS
    5. 201 Created with photo_id and img_url

Error responses (global handlers):
    400 InvalidInputError, 500 BlobStoreFailure / MetadataStoreFailure,
    504 DeadlineExceededError
"""

import asyncio
import io
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.config import settings
from morethantrip.database import get_db_session
from morethantrip.dependencies import get_upload_service
from morethantrip.exceptions import DeadlineExceededError, InvalidInputError
from morethantrip.schemas.common import ErrorResponse
from morethantrip.schemas.photo import (
    LikeRequest,
    LikeResponse,
    PhotoDetailResponse,
    PhotoListResponse,
    PhotoMetadataIn,
    PhotoResponse,
    PhotoUpdate,
    UploadResponse,
)
from morethantrip.schemas.tag import TagResponse
from morethantrip.services.photo_service import photo_service
from morethantrip.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/photos", tags=["Photos"])


def _parse_metadata(raw: Optional[str]) -> PhotoMetadataIn:
    if not raw:
        raise InvalidInputError(
            message="The 'metadata' form field is required",
            field="metadata",
        )
    try:
        return PhotoMetadataIn.model_validate_json(raw)
    except ValidationError as e:
        problems = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidInputError(
            message="The 'metadata' field is not valid photo metadata JSON",
            field="metadata",
            context={"errors": problems},
        ) from e


@router.post(
    "",
    status_code=201,
    response_model=UploadResponse,
    responses={
        201: {"description": "Photo stored and recorded", "model": UploadResponse},
        400: {"description": "Missing or malformed file/metadata", "model": ErrorResponse},
        500: {"description": "Blob or metadata store failure", "model": ErrorResponse},
        504: {"description": "Upload deadline exceeded", "model": ErrorResponse},
    },
    summary="Upload a photo",
)
async def upload_photo(
    file: Optional[UploadFile] = File(None, description="Photo bytes"),
    metadata: Optional[str] = Form(None, description="Photo metadata as a JSON object"),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    """
    Store the photo in object storage, then record it in the database.

    Both parts are declared optional so a missing one is reported as
    InvalidInputError (400) rather than FastAPI's 422.
    """
    if file is None:
        raise InvalidInputError(message="The 'file' form field is required", field="file")

    try:
        # At most one byte past the limit is buffered.
        content = await file.read(settings.max_upload_size + 1)
        filename = file.filename
        content_type = file.content_type
    finally:
        await file.close()

    if not content:
        raise InvalidInputError(message="The uploaded file is empty", field="file")
    if len(content) > settings.max_upload_size:
        raise InvalidInputError(
            message=f"The uploaded file exceeds the {settings.max_upload_size} byte limit",
            field="file",
            context={"max_upload_size": settings.max_upload_size},
        )

    photo_metadata = _parse_metadata(metadata)

    logger.info("Received upload: filename=%s, size=%d bytes", filename or "unknown", len(content))

    timeout = settings.upload_timeout_seconds
    try:
        result = await asyncio.wait_for(
            upload_service.ingest(
                payload=io.BytesIO(content),
                declared_size=len(content),
                original_filename=filename,
                metadata=photo_metadata,
                content_type=content_type,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        logger.error("Upload of %s exceeded the %gs deadline", filename or "unknown", timeout)
        raise DeadlineExceededError(timeout_seconds=timeout) from e

    return UploadResponse(
        photo_id=result.photo_id,
        img_url=result.img_url,
        storage_key=result.storage_key,
    )


@router.get("", response_model=PhotoListResponse, summary="List photos")
async def list_photos(
    region_id: Optional[UUID] = None,
    trip_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    tag_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db_session),
) -> PhotoListResponse:
    return await photo_service.list_photos(
        db, region_id=region_id, trip_id=trip_id, user_id=user_id, tag_id=tag_id
    )


@router.get(
    "/{photo_id}",
    response_model=PhotoDetailResponse,
    responses={404: {"description": "Photo not found", "model": ErrorResponse}},
)
async def get_photo(photo_id: UUID, db: AsyncSession = Depends(get_db_session)) -> PhotoDetailResponse:
    return await photo_service.get_photo(db, photo_id)


@router.put("/{photo_id}", response_model=PhotoResponse)
async def update_photo(
    photo_id: UUID,
    data: PhotoUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PhotoResponse:
    return await photo_service.update_photo(db, photo_id, data)


@router.delete("/{photo_id}", status_code=204)
async def delete_photo(photo_id: UUID, db: AsyncSession = Depends(get_db_session)) -> Response:
    await photo_service.delete_photo(db, photo_id)
    return Response(status_code=204)


@router.get("/{photo_id}/tags", response_model=List[TagResponse])
async def photo_tags(photo_id: UUID, db: AsyncSession = Depends(get_db_session)) -> List[TagResponse]:
    return await photo_service.tags_for_photo(db, photo_id)


@router.post("/{photo_id}/tags/{tag_id}", response_model=List[TagResponse])
async def tag_photo(
    photo_id: UUID,
    tag_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[TagResponse]:
    return await photo_service.tag_photo(db, photo_id, tag_id)


@router.post("/{photo_id}/likes", response_model=LikeResponse)
async def like_photo(
    photo_id: UUID,
    body: LikeRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LikeResponse:
    count = await photo_service.like_photo(db, photo_id, body.user_id)
    return LikeResponse(photo_id=photo_id, likes_count=count)


@router.delete("/{photo_id}/likes/{user_id}", status_code=204)
async def unlike_photo(
    photo_id: UUID,
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await photo_service.unlike_photo(db, photo_id, user_id)
    return Response(status_code=204)
