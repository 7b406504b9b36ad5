"""Region schemas."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class RegionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    country: str = Field(default="", max_length=255)


class RegionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    country: Optional[str] = Field(default=None, max_length=255)


class RegionResponse(BaseModel):
    id: uuid.UUID
    name: str
    country: str

    model_config = {"from_attributes": True}
