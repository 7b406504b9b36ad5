"""
More Than Trip Core — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       uvicorn serves the module-level `app` (uvicorn morethantrip.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:  Request ID → Access log → GZip → CORS      │
    │                                                          │
    │  Routes:  /api/photos  /api/regions  /api/trips          │
    │           /api/tags    /api/users    /health             │
    │                                                          │
    │  Exception Handlers:                                     │
    │    InvalidInput→400  NotFound→404  Conflict→409          │
    │    BlobStore/MetadataStore→500  Deadline→504  DB→500     │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check configuration (log, don't exit)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from morethantrip import __version__
from morethantrip.config import settings
from morethantrip.database import dispose_engine
from morethantrip.exceptions import (
    BlobStoreFailure,
    ConflictError,
    DatabaseError,
    DeadlineExceededError,
    InvalidInputError,
    MetadataStoreFailure,
    MoreThanTripError,
    NotFoundError,
)
from morethantrip.middleware.logging import RequestLoggingMiddleware
from morethantrip.middleware.request_id import request_id_var, RequestIDMiddleware
from morethantrip.routes import health, photos, regions, tags, trips, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout.
    Chatty third-party loggers are held at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "botocore", "boto3", "s3transfer", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("More Than Trip core service %s starting up", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports what is unreachable.
        logger.error("Configuration error: %s", str(e))

    logger.info("Photo bucket: %s (timeout %gs, max %d bytes)",
                settings.s3_bucket, settings.upload_timeout_seconds, settings.max_upload_size)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler table:
        InvalidInputError       → 400 invalid_input
        NotFoundError           → 404 not_found
        ConflictError           → 409 conflict
        BlobStoreFailure        → 500 blob_store_failure
        MetadataStoreFailure    → 500 metadata_store_failure (reason in details)
        DeadlineExceededError   → 504 deadline_exceeded
        DatabaseError           → 500 server_error (context logged, not returned)
        MoreThanTripError       → 500 server_error
        Exception               → 500 internal_server_error

    Upload failures use UploadErrorKind values as their error code.
    """

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(request: Request, exc: InvalidInputError):
        logger.warning("[%s] Invalid input: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=_error_body(exc.kind.value, exc.message, exc.context))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=409, content=_error_body("conflict", exc.message))

    @app.exception_handler(BlobStoreFailure)
    async def handle_blob_store_failure(request: Request, exc: BlobStoreFailure):
        logger.error("[%s] Blob store failure: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(status_code=500, content=_error_body(exc.kind.value, exc.message))

    @app.exception_handler(MetadataStoreFailure)
    async def handle_metadata_store_failure(request: Request, exc: MetadataStoreFailure):
        logger.error(
            "[%s] Metadata store failure (%s), orphaned key %s",
            request_id_var.get(""),
            exc.reason.value,
            exc.orphaned_key,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(exc.kind.value, exc.message, {"reason": exc.reason.value}),
        )

    @app.exception_handler(DeadlineExceededError)
    async def handle_deadline_exceeded(request: Request, exc: DeadlineExceededError):
        logger.error("[%s] %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=504,
            content=_error_body(exc.kind.value, exc.message, {"timeout_seconds": exc.timeout_seconds}),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(MoreThanTripError)
    async def handle_app_error(request: Request, exc: MoreThanTripError):
        logger.error("[%s] %s: %s | Context: %s", request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
        return JSONResponse(status_code=500, content=_error_body("server_error", exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="More Than Trip Core API",
        description=(
            "Travel photo sharing backend: photo uploads to S3 with metadata in "
            "PostgreSQL, plus regions, trips, tags, users and likes."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition: RequestID runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(photos.router)
    app.include_router(regions.router)
    app.include_router(trips.router)
    app.include_router(tags.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
