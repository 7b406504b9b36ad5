"""Trip ORM model."""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from morethantrip.database import Base


class Trip(Base):
    """
    A journey a user took within one region.

    Query Patterns:
        - Trips of a user:   WHERE user_id = :id   → idx_trip_user_id
        - Trips in a region: WHERE region_id = :id → idx_trip_region_id
        - Trips by tag:      JOIN trip_tags ON ... WHERE tag_id = :id
    """

    __tablename__ = "trip"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    place: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    region_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("region.id"), nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )

    __table_args__ = (
        Index("idx_trip_user_id", "user_id"),
        Index("idx_trip_region_id", "region_id"),
    )

    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, name='{self.name}')>"
