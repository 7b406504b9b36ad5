"""
More Than Trip Core — Photo Service
=====================================

What:  Read, edit and delete photo rows, plus their tags and likes.
Why:   Keeps SQLAlchemy out of the route handlers. Creation is not here:
       a photo row only comes into existence through UploadService.ingest.
How:   Stateless; every method receives the request's AsyncSession.

Query plans:
    list_photos:   WHERE <fk> = :id per filter → idx_photo_<fk>_id
                   tag filter → JOIN photo_tags ON photo_id WHERE tag_id = :id
    get_photo:     PK lookup + tag join + COUNT(likes) for one photo_id

Deleting a photo only removes the row (likes and tag links cascade). The
object in the bucket is left where it is.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.exceptions import DatabaseError, MoreThanTripError, NotFoundError
from morethantrip.models import Like, Photo, Tag, photo_tags
from morethantrip.schemas.photo import (
    PhotoDetailResponse,
    PhotoListResponse,
    PhotoResponse,
    PhotoUpdate,
)
from morethantrip.schemas.tag import TagResponse
from morethantrip.services.db_errors import execute_write, flush_changes

logger = logging.getLogger(__name__)


class PhotoService:
    """
    Photo read/update/delete plus tagging and likes.

    Error Handling Strategy:
        NotFoundError for missing photos or tags. Write failures go through
        db_errors (unknown reference → 400, duplicate → 409). Anything
        else SQLAlchemy raises becomes a generic DatabaseError.
    """

    async def _get_or_404(self, db: AsyncSession, photo_id: UUID) -> Photo:
        result = await db.execute(select(Photo).where(Photo.id == photo_id))
        photo = result.scalar_one_or_none()
        if photo is None:
            raise NotFoundError(resource="photo", resource_id=str(photo_id))
        return photo

    async def _tags_of(self, db: AsyncSession, photo_id: UUID) -> List[Tag]:
        result = await db.execute(
            select(Tag)
            .join(photo_tags, photo_tags.c.tag_id == Tag.id)
            .where(photo_tags.c.photo_id == photo_id)
            .order_by(Tag.name)
        )
        return list(result.scalars().all())

    async def get_photo(self, db: AsyncSession, photo_id: UUID) -> PhotoDetailResponse:
        """
        Fetch one photo with its tags and like count.

        Raises:
            NotFoundError: no photo with that id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        try:
            photo = await self._get_or_404(db, photo_id)
            tags = await self._tags_of(db, photo_id)
            likes = await db.execute(
                select(func.count(Like.id)).where(Like.photo_id == photo_id)
            )
            likes_count = likes.scalar() or 0
        except MoreThanTripError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error fetching photo %s: %s", photo_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the photo. Please try again.",
                context={"photo_id": str(photo_id)},
            ) from e

        base = PhotoResponse.model_validate(photo)
        return PhotoDetailResponse(
            **base.model_dump(),
            tags=[TagResponse.model_validate(t) for t in tags],
            likes_count=likes_count,
        )

    async def list_photos(
        self,
        db: AsyncSession,
        region_id: Optional[UUID] = None,
        trip_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        tag_id: Optional[UUID] = None,
    ) -> PhotoListResponse:
        """List photos, newest first, narrowed by any combination of equality filters."""
        query = select(Photo)
        if region_id:
            query = query.where(Photo.region_id == region_id)
        if trip_id:
            query = query.where(Photo.trip_id == trip_id)
        if user_id:
            query = query.where(Photo.user_id == user_id)
        if tag_id:
            query = query.join(photo_tags, photo_tags.c.photo_id == Photo.id).where(
                photo_tags.c.tag_id == tag_id
            )
        query = query.order_by(Photo.created_at.desc())

        try:
            result = await db.execute(query)
            photos = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing photos: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve photos. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return PhotoListResponse(
            count=len(photos),
            items=[PhotoResponse.model_validate(p) for p in photos],
        )

    async def update_photo(
        self, db: AsyncSession, photo_id: UUID, data: PhotoUpdate
    ) -> PhotoResponse:
        """Apply the fields present in `data`. img_url and user_id never change here."""
        photo = await self._get_or_404(db, photo_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(photo, field, value)
        await flush_changes(db, "photo")
        logger.info("Photo %s updated", photo_id)
        return PhotoResponse.model_validate(photo)

    async def delete_photo(self, db: AsyncSession, photo_id: UUID) -> None:
        photo = await self._get_or_404(db, photo_id)
        await db.delete(photo)
        await flush_changes(db, "photo", deleting=True)
        # The object stays in the bucket; log its locator for cleanup.
        logger.info("Photo %s deleted (blob left at %s)", photo_id, photo.img_url)

    async def tags_for_photo(self, db: AsyncSession, photo_id: UUID) -> List[TagResponse]:
        await self._get_or_404(db, photo_id)
        tags = await self._tags_of(db, photo_id)
        return [TagResponse.model_validate(t) for t in tags]

    async def tag_photo(self, db: AsyncSession, photo_id: UUID, tag_id: UUID) -> List[TagResponse]:
        """Attach a tag to a photo. Attaching the same tag twice is a no-op."""
        await self._get_or_404(db, photo_id)
        tag = await db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError(resource="tag", resource_id=str(tag_id))

        await execute_write(
            db,
            pg_insert(photo_tags)
            .values(photo_id=photo_id, tag_id=tag_id)
            .on_conflict_do_nothing(),
            "photo tag",
        )
        logger.info("Tag %s attached to photo %s", tag_id, photo_id)
        return await self.tags_for_photo(db, photo_id)

    async def like_photo(self, db: AsyncSession, photo_id: UUID, user_id: UUID) -> int:
        """
        Record that `user_id` likes the photo. Liking twice is a no-op.

        Returns:
            The photo's like count after the insert.
        """
        await self._get_or_404(db, photo_id)
        await execute_write(
            db,
            pg_insert(Like)
            .values(photo_id=photo_id, user_id=user_id)
            .on_conflict_do_nothing(constraint="uq_likes_photo_user"),
            "like",
        )
        logger.info("User %s liked photo %s", user_id, photo_id)
        result = await db.execute(select(func.count(Like.id)).where(Like.photo_id == photo_id))
        return result.scalar() or 0

    async def unlike_photo(self, db: AsyncSession, photo_id: UUID, user_id: UUID) -> None:
        """Remove a like. Removing a like that doesn't exist is a no-op."""
        await execute_write(
            db,
            delete(Like).where(Like.photo_id == photo_id, Like.user_id == user_id),
            "like",
        )
        logger.info("User %s unliked photo %s", user_id, photo_id)


# ── Singleton Instance ────────────────────────────────────────────────────
photo_service = PhotoService()
