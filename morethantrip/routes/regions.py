"""Region routes: CRUD plus lookup by name."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.database import get_db_session
from morethantrip.schemas.common import ErrorResponse
from morethantrip.schemas.region import RegionCreate, RegionResponse, RegionUpdate
from morethantrip.services.region_service import region_service

router = APIRouter(prefix="/api/regions", tags=["Regions"])


@router.post(
    "",
    status_code=201,
    response_model=RegionResponse,
    responses={409: {"description": "Region name already taken", "model": ErrorResponse}},
)
async def create_region(data: RegionCreate, db: AsyncSession = Depends(get_db_session)) -> RegionResponse:
    return await region_service.create_region(db, data)


@router.get("", response_model=List[RegionResponse])
async def list_regions(db: AsyncSession = Depends(get_db_session)) -> List[RegionResponse]:
    return await region_service.list_regions(db)


# Declared before /{region_id} so "by-name" is never parsed as a UUID.
@router.get("/by-name/{name}", response_model=RegionResponse)
async def get_region_by_name(name: str, db: AsyncSession = Depends(get_db_session)) -> RegionResponse:
    return await region_service.get_region_by_name(db, name)


@router.get("/{region_id}", response_model=RegionResponse)
async def get_region(region_id: UUID, db: AsyncSession = Depends(get_db_session)) -> RegionResponse:
    return await region_service.get_region(db, region_id)


@router.put("/{region_id}", response_model=RegionResponse)
async def update_region(
    region_id: UUID,
    data: RegionUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> RegionResponse:
    return await region_service.update_region(db, region_id, data)


@router.delete("/{region_id}", status_code=204)
async def delete_region(region_id: UUID, db: AsyncSession = Depends(get_db_session)) -> Response:
    await region_service.delete_region(db, region_id)
    return Response(status_code=204)
