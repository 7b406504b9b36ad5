"""
More Than Trip Core — User Service
====================================

What:  CRUD for users (travellers). No authentication: the id in the URL is
       trusted as-is.
How:   Stateless; every method receives the request's AsyncSession.

Usernames are unique; a duplicate on create or rename raises ConflictError.
Deleting a user cascades to their trips, photos and likes in the database.
The photos' objects remain in the bucket.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.exceptions import NotFoundError
from morethantrip.models import User
from morethantrip.schemas.user import UserCreate, UserResponse, UserUpdate
from morethantrip.services.db_errors import flush_changes

logger = logging.getLogger(__name__)


class UserService:

    async def _get_or_404(self, db: AsyncSession, user_id: UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        user = User(**data.model_dump())
        db.add(user)
        await flush_changes(db, "user")
        logger.info("User created: %s (%s)", user.id, user.username)
        return UserResponse.model_validate(user)

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        result = await db.execute(select(User).order_by(User.username))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        return UserResponse.model_validate(await self._get_or_404(db, user_id))

    async def get_user_by_username(self, db: AsyncSession, username: str) -> UserResponse:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", resource_id=username)
        return UserResponse.model_validate(user)

    async def update_user(self, db: AsyncSession, user_id: UUID, data: UserUpdate) -> UserResponse:
        """
        Apply the fields present in `data`.

        Optional profile fields (avatar_url, city, ...) can be cleared by
        sending null explicitly; username and full_name cannot.
        """
        user = await self._get_or_404(db, user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("username", "full_name"):
                continue
            setattr(user, field, value)
        await flush_changes(db, "user")
        logger.info("User %s updated", user_id)
        return UserResponse.model_validate(user)

    async def delete_user(self, db: AsyncSession, user_id: UUID) -> None:
        user = await self._get_or_404(db, user_id)
        await db.delete(user)
        await flush_changes(db, "user", deleting=True)
        logger.info("User %s deleted", user_id)


user_service = UserService()
