# Middleware package init
"""
More Than Trip Core — Middleware Package
==========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request id is set before the access log line is written, so every
    log record for a request can carry it.
"""
