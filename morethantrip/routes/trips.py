"""
More Than Trip Core — Trip Routes
===================================

GET /api/trips accepts user_id, region_id and tag_id as equality filters;
any combination narrows the result. Without filters every trip is returned
(no pagination).
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.database import get_db_session
from morethantrip.schemas.common import ErrorResponse
from morethantrip.schemas.tag import TagResponse
from morethantrip.schemas.trip import TripCreate, TripResponse, TripUpdate
from morethantrip.services.trip_service import trip_service

router = APIRouter(prefix="/api/trips", tags=["Trips"])


@router.post(
    "",
    status_code=201,
    response_model=TripResponse,
    responses={400: {"description": "Unknown region or user", "model": ErrorResponse}},
)
async def create_trip(data: TripCreate, db: AsyncSession = Depends(get_db_session)) -> TripResponse:
    return await trip_service.create_trip(db, data)


@router.get("", response_model=List[TripResponse])
async def list_trips(
    user_id: Optional[UUID] = None,
    region_id: Optional[UUID] = None,
    tag_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db_session),
) -> List[TripResponse]:
    return await trip_service.list_trips(db, user_id=user_id, region_id=region_id, tag_id=tag_id)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(trip_id: UUID, db: AsyncSession = Depends(get_db_session)) -> TripResponse:
    return await trip_service.get_trip(db, trip_id)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: UUID,
    data: TripUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> TripResponse:
    return await trip_service.update_trip(db, trip_id, data)


@router.delete("/{trip_id}", status_code=204)
async def delete_trip(trip_id: UUID, db: AsyncSession = Depends(get_db_session)) -> Response:
    await trip_service.delete_trip(db, trip_id)
    return Response(status_code=204)


@router.post("/{trip_id}/tags/{tag_id}", response_model=List[TagResponse])
async def tag_trip(
    trip_id: UUID,
    tag_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[TagResponse]:
    return await trip_service.tag_trip(db, trip_id, tag_id)
