"""Trip schemas."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class TripCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    place: str = Field(default="", max_length=255)
    region_id: uuid.UUID
    user_id: uuid.UUID


class TripUpdate(BaseModel):
    """Omitted fields keep their current value. Ownership (user_id) cannot change."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    place: Optional[str] = Field(default=None, max_length=255)
    region_id: Optional[uuid.UUID] = None


class TripResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    place: str
    region_id: uuid.UUID
    user_id: uuid.UUID

    model_config = {"from_attributes": True}
