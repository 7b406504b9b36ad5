"""
More Than Trip Core — Region Service
======================================

What:  CRUD for regions, the geographic areas trips and photos belong to.
How:   Stateless; every method receives the request's AsyncSession.

Region names are unique. Creating or renaming onto an existing name raises
ConflictError (409). Deleting a region that trips or photos still reference
is rejected by the database and surfaces as InvalidInputError.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.exceptions import DatabaseError, NotFoundError
from morethantrip.models import Region
from morethantrip.schemas.region import RegionCreate, RegionResponse, RegionUpdate
from morethantrip.services.db_errors import flush_changes

logger = logging.getLogger(__name__)


class RegionService:

    async def _get_or_404(self, db: AsyncSession, region_id: UUID) -> Region:
        region = await db.get(Region, region_id)
        if region is None:
            raise NotFoundError(resource="region", resource_id=str(region_id))
        return region

    async def create_region(self, db: AsyncSession, data: RegionCreate) -> RegionResponse:
        region = Region(name=data.name, country=data.country)
        db.add(region)
        await flush_changes(db, "region")
        logger.info("Region created: %s (%s)", region.id, region.name)
        return RegionResponse.model_validate(region)

    async def list_regions(self, db: AsyncSession) -> List[RegionResponse]:
        try:
            result = await db.execute(select(Region).order_by(Region.name))
        except SQLAlchemyError as e:
            logger.error("Database error listing regions: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve regions. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [RegionResponse.model_validate(r) for r in result.scalars().all()]

    async def get_region(self, db: AsyncSession, region_id: UUID) -> RegionResponse:
        return RegionResponse.model_validate(await self._get_or_404(db, region_id))

    async def get_region_by_name(self, db: AsyncSession, name: str) -> RegionResponse:
        """Exact, case-sensitive match on the unique name column."""
        result = await db.execute(select(Region).where(Region.name == name))
        region = result.scalar_one_or_none()
        if region is None:
            raise NotFoundError(resource="region", resource_id=name)
        return RegionResponse.model_validate(region)

    async def update_region(
        self, db: AsyncSession, region_id: UUID, data: RegionUpdate
    ) -> RegionResponse:
        region = await self._get_or_404(db, region_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(region, field, value)
        await flush_changes(db, "region")
        logger.info("Region %s updated", region_id)
        return RegionResponse.model_validate(region)

    async def delete_region(self, db: AsyncSession, region_id: UUID) -> None:
        region = await self._get_or_404(db, region_id)
        await db.delete(region)
        await flush_changes(db, "region", deleting=True)
        logger.info("Region %s deleted", region_id)


region_service = RegionService()
