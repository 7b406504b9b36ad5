"""Tag routes."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.database import get_db_session
from morethantrip.schemas.tag import TagCreate, TagResponse
from morethantrip.services.tag_service import tag_service

router = APIRouter(prefix="/api/tags", tags=["Tags"])


@router.post("", status_code=201, response_model=TagResponse)
async def create_tag(data: TagCreate, db: AsyncSession = Depends(get_db_session)) -> TagResponse:
    return await tag_service.create_tag(db, data)


@router.get("", response_model=List[TagResponse])
async def list_tags(db: AsyncSession = Depends(get_db_session)) -> List[TagResponse]:
    return await tag_service.list_tags(db)


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(tag_id: UUID, db: AsyncSession = Depends(get_db_session)) -> Response:
    await tag_service.delete_tag(db, tag_id)
    return Response(status_code=204)
