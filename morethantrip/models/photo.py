"""
More Than Trip Core — Photo and Like SQLAlchemy Models
========================================================

What:  ORM models for the `photo` and `likes` tables.
Why:   The photo row is the unit persisted by the upload workflow; likes hang
       off it.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for
       migrations.

Table Design Rationale:
    - img_url: the locator returned by the blob store. The photo bytes never
      touch the database. Populated by the upload service, never by the client.
    - region_id / trip_id / user_id: plain foreign keys. The database rejects
      unknown references, which the repository turns into
      ForeignKeyViolationError.
    - coords / place: free-form strings exactly as the client sends them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from morethantrip.database import Base


class Photo(Base):
    """
    Metadata for one uploaded photo.

    Lifecycle:
        1. Created exactly once per successful upload, after the blob write
        2. coords/description/place/region/trip may be edited later
        3. Deleting the row leaves the blob in the bucket

    Query Patterns:
        - By trip / user / region: WHERE <fk> = :id → one index per column
        - By tag: WHERE id IN (SELECT photo_id FROM photo_tags WHERE tag_id = :id)
    """

    __tablename__ = "photo"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    coords: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # ── Locator ───────────────────────────────────────────────────────────
    # Never empty once the row exists; see UploadService.ingest
    img_url: Mapped[str] = mapped_column(String(2048), nullable=False)

    place: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    region_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("region.id"), nullable=False,
    )
    trip_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("trip.id", ondelete="CASCADE"), nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_photo_trip_id", "trip_id"),
        Index("idx_photo_user_id", "user_id"),
        Index("idx_photo_region_id", "region_id"),
    )

    def __repr__(self) -> str:
        return f"<Photo(id={self.id}, img_url='{self.img_url}')>"


class Like(Base):
    """One user's like on one photo. The (photo_id, user_id) pair is unique."""

    __tablename__ = "likes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    photo_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("photo.id", ondelete="CASCADE"), nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("photo_id", "user_id", name="uq_likes_photo_user"),
    )
