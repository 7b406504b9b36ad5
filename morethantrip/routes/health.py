"""
More Than Trip Core — Health Check Route
==========================================

What:  GET /health for container probes and load balancers.
How:   Two lightweight probes: SELECT 1 against the database and
       head_bucket against the photo bucket.

Status levels:
    healthy:   database and bucket reachable              (HTTP 200)
    degraded:  database up, bucket unreachable; reads
               work, uploads will fail                    (HTTP 200)
    unhealthy: database unreachable                       (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from morethantrip import __version__
from morethantrip.database import engine
from morethantrip.dependencies import get_blob_store
from morethantrip.schemas.common import HealthResponse
from morethantrip.services.stores import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def check_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(blob_store: BlobStore = Depends(get_blob_store)):
    db_ok = await check_database()
    storage_ok = await blob_store.health_check()

    if not db_ok:
        overall = "unhealthy"
    elif not storage_ok:
        overall = "degraded"
    else:
        overall = "healthy"

    body = HealthResponse(
        status=overall,
        version=__version__,
        database="connected" if db_ok else "disconnected",
        object_storage="available" if storage_ok else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=503 if overall == "unhealthy" else 200, content=body.model_dump())
