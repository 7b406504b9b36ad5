"""
More Than Trip Core — SQL Photo Store
=======================================

What:  MetadataStore implementation that inserts photo rows through the
       request's AsyncSession.
Why:   UploadService only knows the MetadataStore contract; this adapter
       carries the SQLAlchemy specifics.
How:   db.add() + db.flush() + db.commit(). The row is durable before
       insert_photo returns, so a failed INSERT or COMMIT surfaces inside the
       ingest call (and inside the upload deadline) instead of after the
       handler has already answered 201.
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from morethantrip.exceptions import DatabaseError
from morethantrip.models.photo import Photo
from morethantrip.schemas.photo import PhotoMetadataIn
from morethantrip.services.db_errors import translate_integrity_error
from morethantrip.services.stores import MetadataStore

logger = logging.getLogger(__name__)


class SqlPhotoStore(MetadataStore):
    """Per-request adapter; one instance wraps one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_photo(self, metadata: PhotoMetadataIn, img_url: str) -> uuid.UUID:
        photo = Photo(
            coords=metadata.coords,
            description=metadata.description,
            img_url=img_url,
            place=metadata.place,
            region_id=metadata.region_id,
            trip_id=metadata.trip_id,
            user_id=metadata.user_id,
        )
        self.db.add(photo)
        try:
            await self.db.flush()
            photo_id = photo.id
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, "photo") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                message="Could not save the photo. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Photo row committed: %s", photo_id)
        return photo_id
