"""
More Than Trip Core — Photo Schemas
=====================================

What:  API contract for photo uploads, reads, updates and likes.

PhotoMetadataIn is the JSON carried in the `metadata` form field of an
upload. It deliberately has no img_url field: the locator comes from the
blob store, and anything the client sends under that name is dropped.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from morethantrip.schemas.tag import TagResponse


class PhotoMetadataIn(BaseModel):
    """
    Caller-supplied photo metadata, minus the locator.

    The three references are required; whether they point at existing rows
    is checked by the database on insert, not here.
    """
    coords: str = Field(default="", max_length=255, description="Free-form coordinates, e.g. '-22.97,-43.18'")
    description: str = Field(default="", description="Free text shown under the photo")
    place: str = Field(default="", max_length=255, description="Place name, e.g. 'Copacabana'")
    region_id: uuid.UUID
    trip_id: uuid.UUID
    user_id: uuid.UUID

    model_config = {"extra": "ignore"}


class PhotoUpdate(BaseModel):
    """Editable photo fields. Omitted fields keep their current value."""
    coords: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    place: Optional[str] = Field(default=None, max_length=255)
    region_id: Optional[uuid.UUID] = None
    trip_id: Optional[uuid.UUID] = None


class PhotoResponse(BaseModel):
    id: uuid.UUID
    coords: str
    description: str
    img_url: str
    place: str
    region_id: uuid.UUID
    trip_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class PhotoDetailResponse(PhotoResponse):
    """Single photo with its tags and like count (GET /api/photos/{id})."""
    tags: List[TagResponse] = Field(default_factory=list)
    likes_count: int = 0


class PhotoListResponse(BaseModel):
    count: int
    items: List[PhotoResponse]


class UploadResponse(BaseModel):
    """
    What:  Returned by POST /api/photos with HTTP 201.
    img_url is the blob-store locator now stored on the photo row.
    """
    message: str = Field(default="Photo uploaded successfully")
    photo_id: uuid.UUID
    img_url: str
    storage_key: str


class LikeRequest(BaseModel):
    user_id: uuid.UUID


class LikeResponse(BaseModel):
    photo_id: uuid.UUID
    likes_count: int
