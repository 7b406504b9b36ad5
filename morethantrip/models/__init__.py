"""
More Than Trip Core — ORM Models
==================================

Importing this package registers every table with Base.metadata, which is
what Alembic's env.py and the tests rely on.

Tables:
    region      → Region
    users       → User
    trip        → Trip          (+ trip_tags association)
    tag         → Tag
    photo       → Photo         (+ photo_tags association)
    likes       → Like
"""

from morethantrip.models.region import Region
from morethantrip.models.user import User
from morethantrip.models.tag import Tag, photo_tags, trip_tags
from morethantrip.models.trip import Trip
from morethantrip.models.photo import Like, Photo

__all__ = [
    "Region",
    "User",
    "Tag",
    "Trip",
    "Photo",
    "Like",
    "photo_tags",
    "trip_tags",
]
