"""
More Than Trip Core — API Surface Tests
=========================================

What:  CRUD routes, the error envelope, /health and the request-id header,
       with services stubbed and the session dependency replaced.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from morethantrip.database import get_db_session
from morethantrip.dependencies import get_blob_store
from morethantrip.exceptions import ConflictError, DatabaseError, InvalidInputError, NotFoundError
from morethantrip.routes import health
from morethantrip.schemas.region import RegionResponse
from morethantrip.services.photo_service import photo_service
from morethantrip.services.region_service import region_service
from morethantrip.services.trip_service import trip_service
from morethantrip.services.user_service import user_service


@pytest.fixture
def db_override(app, mock_db_session):
    async def override():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override
    return mock_db_session


class TestCrudRoutes:

    @pytest.mark.asyncio
    async def test_region_by_name_is_not_parsed_as_id(self, test_client, db_override, monkeypatch):
        region = RegionResponse(id=uuid.uuid4(), name="Rio", country="BR")
        monkeypatch.setattr(region_service, "get_region_by_name", AsyncMock(return_value=region))

        response = await test_client.get("/api/regions/by-name/Rio")

        assert response.status_code == 200
        assert response.json()["id"] == str(region.id)

    @pytest.mark.asyncio
    async def test_not_found_envelope(self, test_client, db_override, monkeypatch):
        region_id = uuid.uuid4()
        monkeypatch.setattr(
            region_service,
            "get_region",
            AsyncMock(side_effect=NotFoundError(resource="region", resource_id=str(region_id))),
        )

        response = await test_client.get(f"/api/regions/{region_id}")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert str(region_id) in body["message"]
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_conflict(self, test_client, db_override, monkeypatch):
        monkeypatch.setattr(user_service, "create_user", AsyncMock(side_effect=ConflictError()))

        response = await test_client.post("/api/users", json={"username": "ana"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_unknown_reference_on_create_is_400(self, test_client, db_override, monkeypatch):
        monkeypatch.setattr(
            trip_service,
            "create_trip",
            AsyncMock(side_effect=InvalidInputError(message="The trip references a region, trip, user or tag that does not exist")),
        )

        response = await test_client.post(
            "/api/trips",
            json={"name": "Carnival", "region_id": str(uuid.uuid4()), "user_id": str(uuid.uuid4())},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    @pytest.mark.asyncio
    async def test_unknown_reference_hides_driver_text(self, test_client, db_override):
        driver_error = Exception(
            'insert or update on table "trip" violates foreign key constraint "trip_user_id_fkey"'
        )
        driver_error.sqlstate = "23503"
        db_override.flush = AsyncMock(side_effect=IntegrityError("INSERT", {}, driver_error))

        response = await test_client.post(
            "/api/trips",
            json={"name": "Carnival", "region_id": str(uuid.uuid4()), "user_id": str(uuid.uuid4())},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["details"] == {"resource": "trip"}
        assert "trip_user_id_fkey" not in response.text

    @pytest.mark.asyncio
    async def test_delete_referenced_region_is_conflict(self, test_client, db_override):
        driver_error = Exception('update or delete on table "region" violates foreign key constraint')
        driver_error.sqlstate = "23503"
        db_override.get = AsyncMock(return_value=MagicMock())
        db_override.flush = AsyncMock(side_effect=IntegrityError("DELETE", {}, driver_error))

        response = await test_client.delete(f"/api/regions/{uuid.uuid4()}")

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_database_error_hides_context(self, test_client, db_override, monkeypatch):
        monkeypatch.setattr(
            trip_service,
            "list_trips",
            AsyncMock(side_effect=DatabaseError(context={"detail": "relation trip does not exist"})),
        )

        response = await test_client.get("/api/trips")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "details" not in body
        assert "relation" not in response.text

    @pytest.mark.asyncio
    async def test_delete_photo_returns_204(self, test_client, db_override, monkeypatch):
        delete = AsyncMock(return_value=None)
        monkeypatch.setattr(photo_service, "delete_photo", delete)
        photo_id = uuid.uuid4()

        response = await test_client.delete(f"/api/photos/{photo_id}")

        assert response.status_code == 204
        assert delete.await_args[0][1] == photo_id

    @pytest.mark.asyncio
    async def test_like_photo(self, test_client, db_override, monkeypatch):
        monkeypatch.setattr(photo_service, "like_photo", AsyncMock(return_value=4))
        photo_id = uuid.uuid4()

        response = await test_client.post(f"/api/photos/{photo_id}/likes", json={"user_id": str(uuid.uuid4())})

        assert response.status_code == 200
        assert response.json() == {"photo_id": str(photo_id), "likes_count": 4}


class TestHealth:

    @pytest.fixture
    def storage(self, app, blob_store):
        app.dependency_overrides[get_blob_store] = lambda: blob_store
        return blob_store

    @pytest.mark.asyncio
    async def test_healthy(self, test_client, storage, monkeypatch):
        monkeypatch.setattr(health, "check_database", AsyncMock(return_value=True))

        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["object_storage"] == "available"

    @pytest.mark.asyncio
    async def test_degraded_when_bucket_unreachable(self, test_client, storage, monkeypatch):
        monkeypatch.setattr(health, "check_database", AsyncMock(return_value=True))
        storage.error = ConnectionError("bucket unreachable")

        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_unhealthy_when_database_down(self, test_client, storage, monkeypatch):
        monkeypatch.setattr(health, "check_database", AsyncMock(return_value=False))

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_supplied_id_is_echoed(self, test_client, db_override, monkeypatch):
        monkeypatch.setattr(region_service, "list_regions", AsyncMock(return_value=[]))

        response = await test_client.get("/api/regions", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_unsafe_id_is_replaced(self, test_client, db_override, monkeypatch):
        monkeypatch.setattr(region_service, "list_regions", AsyncMock(return_value=[]))

        response = await test_client.get("/api/regions", headers={"X-Request-ID": "bad id with spaces"})

        rid = response.headers["X-Request-ID"]
        assert rid != "bad id with spaces"
        assert len(rid) == 8
