"""Tag ORM model and the association tables that attach tags to photos and trips."""

import uuid

from sqlalchemy import Column, ForeignKey, String, Table, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from morethantrip.database import Base


class Tag(Base):
    __tablename__ = "tag"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"


# Deleting a photo, trip or tag drops its links; the other side stays.
photo_tags = Table(
    "photo_tags",
    Base.metadata,
    Column("photo_id", UUID(as_uuid=True), ForeignKey("photo.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", UUID(as_uuid=True), ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)

trip_tags = Table(
    "trip_tags",
    Base.metadata,
    Column("trip_id", UUID(as_uuid=True), ForeignKey("trip.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", UUID(as_uuid=True), ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)
