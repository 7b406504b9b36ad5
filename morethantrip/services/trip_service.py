"""
More Than Trip Core — Trip Service
====================================

What:  CRUD for trips plus tagging.
How:   Stateless; every method receives the request's AsyncSession.

A trip belongs to exactly one user (trip.user_id); listing "trips of a
user" is a plain equality filter on that column. Deleting a trip cascades
to its photos' rows, not to their objects in the bucket.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.exceptions import DatabaseError, NotFoundError
from morethantrip.models import Tag, Trip, trip_tags
from morethantrip.schemas.tag import TagResponse
from morethantrip.schemas.trip import TripCreate, TripResponse, TripUpdate
from morethantrip.services.db_errors import execute_write, flush_changes

logger = logging.getLogger(__name__)


class TripService:

    async def _get_or_404(self, db: AsyncSession, trip_id: UUID) -> Trip:
        trip = await db.get(Trip, trip_id)
        if trip is None:
            raise NotFoundError(resource="trip", resource_id=str(trip_id))
        return trip

    async def create_trip(self, db: AsyncSession, data: TripCreate) -> TripResponse:
        trip = Trip(**data.model_dump())
        db.add(trip)
        await flush_changes(db, "trip")
        logger.info("Trip created: %s for user %s", trip.id, trip.user_id)
        return TripResponse.model_validate(trip)

    async def get_trip(self, db: AsyncSession, trip_id: UUID) -> TripResponse:
        return TripResponse.model_validate(await self._get_or_404(db, trip_id))

    async def list_trips(
        self,
        db: AsyncSession,
        user_id: Optional[UUID] = None,
        region_id: Optional[UUID] = None,
        tag_id: Optional[UUID] = None,
    ) -> List[TripResponse]:
        """
        List trips narrowed by any combination of equality filters.

        Query plan:
            user_id   → idx_trip_user_id
            region_id → idx_trip_region_id
            tag_id    → JOIN trip_tags ON trip_id WHERE tag_id = :id
        """
        query = select(Trip)
        if user_id:
            query = query.where(Trip.user_id == user_id)
        if region_id:
            query = query.where(Trip.region_id == region_id)
        if tag_id:
            query = query.join(trip_tags, trip_tags.c.trip_id == Trip.id).where(
                trip_tags.c.tag_id == tag_id
            )
        query = query.order_by(Trip.name)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error listing trips: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve trips. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [TripResponse.model_validate(t) for t in result.scalars().all()]

    async def update_trip(self, db: AsyncSession, trip_id: UUID, data: TripUpdate) -> TripResponse:
        trip = await self._get_or_404(db, trip_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(trip, field, value)
        await flush_changes(db, "trip")
        logger.info("Trip %s updated", trip_id)
        return TripResponse.model_validate(trip)

    async def delete_trip(self, db: AsyncSession, trip_id: UUID) -> None:
        trip = await self._get_or_404(db, trip_id)
        await db.delete(trip)
        await flush_changes(db, "trip", deleting=True)
        logger.info("Trip %s deleted", trip_id)

    async def tag_trip(self, db: AsyncSession, trip_id: UUID, tag_id: UUID) -> List[TagResponse]:
        """Attach a tag to a trip (no-op if already attached) and return the trip's tags."""
        await self._get_or_404(db, trip_id)
        if await db.get(Tag, tag_id) is None:
            raise NotFoundError(resource="tag", resource_id=str(tag_id))

        await execute_write(
            db,
            pg_insert(trip_tags).values(trip_id=trip_id, tag_id=tag_id).on_conflict_do_nothing(),
            "trip tag",
        )
        result = await db.execute(
            select(Tag)
            .join(trip_tags, trip_tags.c.tag_id == Tag.id)
            .where(trip_tags.c.trip_id == trip_id)
            .order_by(Tag.name)
        )
        logger.info("Tag %s attached to trip %s", tag_id, trip_id)
        return [TagResponse.model_validate(t) for t in result.scalars().all()]


trip_service = TripService()
