"""Global exception handlers for FastAPI.

Error bodies are JSON but keep the ``text/event-stream`` content type of the
successful chat response so clients can use one code path for both.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import APIError
from .schemas import ErrorResponse

logger = structlog.get_logger()

ERROR_MEDIA_TYPE = "text/event-stream"


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(APIError)
    async def api_error_handler(
        request: Request,
        exc: APIError,
    ) -> JSONResponse:
        """Handle proxy domain errors.

        Args:
            request: Request instance
            exc: APIError exception

        Returns:
            JSON error response
        """
        request_id = getattr(request.state, "request_id", "unknown")

        logger.warning(
            "api_error",
            request_id=request_id,
            status_code=exc.status_code,
            code=exc.code,
            message=exc.message,
        )

        detail_str = None
        if isinstance(exc.detail, dict):
            detail_str = exc.detail.get("detail")
        elif isinstance(exc.detail, str):
            detail_str = exc.detail

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.message,
                detail=detail_str,
                code=exc.code,
                request_id=request_id,
            ).model_dump(),
            media_type=ERROR_MEDIA_TYPE,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions raised by routing.

        Args:
            request: Request instance
            exc: HTTPException

        Returns:
            JSON error response
        """
        request_id = getattr(request.state, "request_id", "unknown")

        logger.warning(
            "http_error",
            request_id=request_id,
            status_code=exc.status_code,
            detail=exc.detail,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code=f"HTTP_{exc.status_code}",
                request_id=request_id,
            ).model_dump(),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions.

        Args:
            request: Request instance
            exc: Unhandled exception

        Returns:
            JSON error response
        """
        request_id = getattr(request.state, "request_id", "unknown")

        logger.exception(
            "unhandled_error",
            request_id=request_id,
            error_type=type(exc).__name__,
            error=str(exc),
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                detail=None,  # Don't expose internal details
                code="INTERNAL_ERROR",
                request_id=request_id,
            ).model_dump(),
            media_type=ERROR_MEDIA_TYPE,
        )
