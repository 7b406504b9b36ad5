"""Create core tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates region, users, tag, trip, photo, likes and the two tag
       association tables.
How:   UUID primary keys generated by gen_random_uuid() (PostgreSQL 13+),
       foreign keys with ON DELETE CASCADE where a child can't outlive its
       owner.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _fk(name: str, target: str, cascade: bool = True) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete="CASCADE" if cascade else None),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "region",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("country", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_region_name"),
    )

    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("birth_date", sa.String(32), nullable=True, comment="Free-form, as entered"),
        sa.Column("education", sa.String(255), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "tag",
        _id_column(),
        sa.Column("name", sa.String(64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_tag_name"),
    )

    op.create_table(
        "trip",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("place", sa.String(255), nullable=False, server_default=sa.text("''")),
        _fk("region_id", "region.id", cascade=False),
        _fk("user_id", "users.id"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_trip_user_id", "trip", ["user_id"])
    op.create_index("idx_trip_region_id", "trip", ["region_id"])

    op.create_table(
        "photo",
        _id_column(),
        sa.Column("coords", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "img_url",
            sa.String(2048),
            nullable=False,
            comment="Object storage locator returned by the blob store",
        ),
        sa.Column("place", sa.String(255), nullable=False, server_default=sa.text("''")),
        _fk("region_id", "region.id", cascade=False),
        _fk("trip_id", "trip.id"),
        _fk("user_id", "users.id"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_photo_trip_id", "photo", ["trip_id"])
    op.create_index("idx_photo_user_id", "photo", ["user_id"])
    op.create_index("idx_photo_region_id", "photo", ["region_id"])

    op.create_table(
        "likes",
        _id_column(),
        _fk("photo_id", "photo.id"),
        _fk("user_id", "users.id"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("photo_id", "user_id", name="uq_likes_photo_user"),
    )

    op.create_table(
        "photo_tags",
        _fk("photo_id", "photo.id"),
        _fk("tag_id", "tag.id"),
        sa.PrimaryKeyConstraint("photo_id", "tag_id"),
    )

    op.create_table(
        "trip_tags",
        _fk("trip_id", "trip.id"),
        _fk("tag_id", "tag.id"),
        sa.PrimaryKeyConstraint("trip_id", "tag_id"),
    )


def downgrade() -> None:
    op.drop_table("trip_tags")
    op.drop_table("photo_tags")
    op.drop_table("likes")
    op.drop_index("idx_photo_region_id", table_name="photo")
    op.drop_index("idx_photo_user_id", table_name="photo")
    op.drop_index("idx_photo_trip_id", table_name="photo")
    op.drop_table("photo")
    op.drop_index("idx_trip_region_id", table_name="trip")
    op.drop_index("idx_trip_user_id", table_name="trip")
    op.drop_table("trip")
    op.drop_table("tag")
    op.drop_table("users")
    op.drop_table("region")
