"""FastAPI middleware components."""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = structlog.get_logger()

STREAM_CONTENT_TYPE = "text/event-stream"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign each request an ID.

    The ID is stored in request.state.request_id, bound into the structlog
    context for everything logged while the request is handled (upstream
    calls included), and returned in the X-Request-ID response header.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log request start and completion.

    A successful chat response is flagged ``streamed``. Its completion is
    logged once headers are sent, so ``duration_ms`` is the time to first
    byte rather than the length of the stream.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")

        logger.info(
            "request_started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        content_type = response.headers.get("content-type", "")

        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            streamed=response.status_code < 400 and content_type.startswith(STREAM_CONTENT_TYPE),
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        return response
