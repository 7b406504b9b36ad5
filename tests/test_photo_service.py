"""
More Than Trip Core — Photo Service Unit Tests
================================================

What:  PhotoService reads, edits, deletes, tags and likes against a mocked
       AsyncSession.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from morethantrip.exceptions import DatabaseError, InvalidInputError, NotFoundError
from morethantrip.models import Photo, Tag
from morethantrip.schemas.photo import PhotoUpdate
from morethantrip.services.photo_service import PhotoService


def make_photo(**overrides) -> Photo:
    fields = dict(
        id=uuid.uuid4(),
        coords="-22.97,-43.18",
        description="Sunset",
        img_url="https://test-photos.s3.amazonaws.com/1700000000_beach.jpg",
        place="Copacabana",
        region_id=uuid.uuid4(),
        trip_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        created_at=datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Photo(**fields)


def scalar_one(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def scalars(values) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


def scalar(value) -> MagicMock:
    result = MagicMock()
    result.scalar.return_value = value
    return result


class TestGetPhoto:

    def setup_method(self):
        self.service = PhotoService()

    @pytest.mark.asyncio
    async def test_detail_includes_tags_and_likes(self, mock_db_session):
        photo = make_photo()
        tag = Tag(id=uuid.uuid4(), name="beach")
        mock_db_session.execute = AsyncMock(
            side_effect=[scalar_one(photo), scalars([tag]), scalar(3)]
        )

        detail = await self.service.get_photo(mock_db_session, photo.id)

        assert detail.id == photo.id
        assert detail.img_url == photo.img_url
        assert [t.name for t in detail.tags] == ["beach"]
        assert detail.likes_count == 3

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_one(None))

        with pytest.raises(NotFoundError):
            await self.service.get_photo(mock_db_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_database_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))

        with pytest.raises(DatabaseError):
            await self.service.get_photo(mock_db_session, uuid.uuid4())


class TestListPhotos:

    def setup_method(self):
        self.service = PhotoService()

    @pytest.mark.asyncio
    async def test_returns_all_rows(self, mock_db_session):
        photos = [make_photo(), make_photo()]
        mock_db_session.execute = AsyncMock(return_value=scalars(photos))

        result = await self.service.list_photos(mock_db_session)

        assert result.count == 2
        assert {p.id for p in result.items} == {p.id for p in photos}

    @pytest.mark.asyncio
    async def test_filters_end_up_in_query(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalars([]))
        trip_id, tag_id = uuid.uuid4(), uuid.uuid4()

        await self.service.list_photos(mock_db_session, trip_id=trip_id, tag_id=tag_id)

        sql = str(mock_db_session.execute.call_args[0][0])
        assert "photo.trip_id" in sql
        assert "photo_tags.tag_id" in sql
        assert "photo.user_id =" not in sql


class TestUpdateAndDelete:

    def setup_method(self):
        self.service = PhotoService()

    @pytest.mark.asyncio
    async def test_update_applies_only_sent_fields(self, mock_db_session):
        photo = make_photo()
        original_url = photo.img_url
        mock_db_session.execute = AsyncMock(return_value=scalar_one(photo))

        result = await self.service.update_photo(
            mock_db_session, photo.id, PhotoUpdate(description="Golden hour")
        )

        assert result.description == "Golden hour"
        assert result.place == "Copacabana"
        assert result.img_url == original_url
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_to_unknown_trip_is_invalid_input(self, mock_db_session):
        photo = make_photo()
        mock_db_session.execute = AsyncMock(return_value=scalar_one(photo))
        driver_error = Exception("violates foreign key constraint")
        mock_db_session.flush = AsyncMock(side_effect=IntegrityError("UPDATE", {}, driver_error))

        with pytest.raises(InvalidInputError):
            await self.service.update_photo(mock_db_session, photo.id, PhotoUpdate(trip_id=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_delete(self, mock_db_session):
        photo = make_photo()
        mock_db_session.execute = AsyncMock(return_value=scalar_one(photo))

        await self.service.delete_photo(mock_db_session, photo.id)

        mock_db_session.delete.assert_awaited_once_with(photo)

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_one(None))

        with pytest.raises(NotFoundError):
            await self.service.delete_photo(mock_db_session, uuid.uuid4())
        mock_db_session.delete.assert_not_awaited()


class TestTagsAndLikes:

    def setup_method(self):
        self.service = PhotoService()

    @pytest.mark.asyncio
    async def test_tag_photo_unknown_tag(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_one(make_photo()))
        mock_db_session.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="tag"):
            await self.service.tag_photo(mock_db_session, uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_tag_photo_returns_tags(self, mock_db_session):
        photo = make_photo()
        tag = Tag(id=uuid.uuid4(), name="sunset")
        mock_db_session.get = AsyncMock(return_value=tag)
        mock_db_session.execute = AsyncMock(
            side_effect=[scalar_one(photo), MagicMock(), scalar_one(photo), scalars([tag])]
        )

        tags = await self.service.tag_photo(mock_db_session, photo.id, tag.id)

        assert [t.name for t in tags] == ["sunset"]
        insert_sql = str(mock_db_session.execute.call_args_list[1][0][0])
        assert "photo_tags" in insert_sql

    @pytest.mark.asyncio
    async def test_like_returns_count(self, mock_db_session):
        photo = make_photo()
        mock_db_session.execute = AsyncMock(
            side_effect=[scalar_one(photo), MagicMock(), scalar(1)]
        )

        count = await self.service.like_photo(mock_db_session, photo.id, uuid.uuid4())

        assert count == 1

    @pytest.mark.asyncio
    async def test_like_unknown_user_is_invalid_input(self, mock_db_session):
        photo = make_photo()
        fk = IntegrityError("INSERT", {}, Exception("violates foreign key constraint likes_user_id_fkey"))
        mock_db_session.execute = AsyncMock(side_effect=[scalar_one(photo), fk])

        with pytest.raises(InvalidInputError):
            await self.service.like_photo(mock_db_session, photo.id, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_like_missing_photo(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=scalar_one(None))

        with pytest.raises(NotFoundError):
            await self.service.like_photo(mock_db_session, uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_unlike_issues_delete(self, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=MagicMock())

        await self.service.unlike_photo(mock_db_session, uuid.uuid4(), uuid.uuid4())

        sql = str(mock_db_session.execute.call_args[0][0])
        assert sql.startswith("DELETE FROM likes")
