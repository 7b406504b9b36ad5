"""
More Than Trip Core — Access Log Middleware
=============================================

What:  One log line per request on the "morethantrip.access" logger.
How:   Measures wall time around call_next and picks the level from the
       status class (5xx ERROR, 4xx WARNING, otherwise INFO).

Line format:
    POST /api/photos 201 842.3ms [1a2b3c4d] from 10.0.0.7 (2481133 bytes in)

/health is not logged; probes hit it every few seconds. Request bodies are
never logged: an upload body is the photo itself.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from morethantrip.middleware.request_id import request_id_var

logger = logging.getLogger("morethantrip.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"
        bytes_in = request.headers.get("content-length", "-")
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s (%s bytes in)",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            bytes_in,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
