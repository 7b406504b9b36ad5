"""User routes: CRUD plus lookup by username."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.database import get_db_session
from morethantrip.schemas.common import ErrorResponse
from morethantrip.schemas.user import UserCreate, UserResponse, UserUpdate
from morethantrip.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    responses={409: {"description": "Username already taken", "model": ErrorResponse}},
)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    return await user_service.create_user(db, data)


@router.get("", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.get("/by-username/{username}", response_model=UserResponse)
async def get_user_by_username(username: str, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    return await user_service.get_user_by_username(db, username)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.update_user(db, user_id, data)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: UUID, db: AsyncSession = Depends(get_db_session)) -> Response:
    await user_service.delete_user(db, user_id)
    return Response(status_code=204)
