"""User schemas."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    full_name: str = Field(default="", max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    birth_date: Optional[str] = Field(default=None, max_length=32)
    education: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=255)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=64)
    full_name: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    birth_date: Optional[str] = Field(default=None, max_length=32)
    education: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=255)


class UserResponse(BaseModel):
    id: uuid.UUID
    username: str
    full_name: str
    avatar_url: Optional[str] = None
    birth_date: Optional[str] = None
    education: Optional[str] = None
    city: Optional[str] = None

    model_config = {"from_attributes": True}
