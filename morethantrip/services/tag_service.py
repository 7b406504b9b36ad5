"""Tag service: create, list and delete tags. Attaching tags lives with photos and trips."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.exceptions import NotFoundError
from morethantrip.models import Tag
from morethantrip.schemas.tag import TagCreate, TagResponse
from morethantrip.services.db_errors import flush_changes

logger = logging.getLogger(__name__)


class TagService:

    async def create_tag(self, db: AsyncSession, data: TagCreate) -> TagResponse:
        tag = Tag(name=data.name)
        db.add(tag)
        await flush_changes(db, "tag")
        logger.info("Tag created: %s (%s)", tag.id, tag.name)
        return TagResponse.model_validate(tag)

    async def list_tags(self, db: AsyncSession) -> List[TagResponse]:
        result = await db.execute(select(Tag).order_by(Tag.name))
        return [TagResponse.model_validate(t) for t in result.scalars().all()]

    async def delete_tag(self, db: AsyncSession, tag_id: UUID) -> None:
        # photo_tags / trip_tags rows go with it (ON DELETE CASCADE)
        tag = await db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError(resource="tag", resource_id=str(tag_id))
        await db.delete(tag)
        await flush_changes(db, "tag", deleting=True)
        logger.info("Tag %s deleted", tag_id)


tag_service = TagService()
