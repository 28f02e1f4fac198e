"""FastAPI application factory and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import APISettings, ProxySettings, get_api_settings, get_proxy_settings
from .handlers import register_exception_handlers
from .middleware import LoggingMiddleware, RequestIDMiddleware
from .routers import chat_router, health_router

logger = structlog.get_logger()


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level name
        json_logs: Render JSON lines instead of console output
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def create_http_client(settings: ProxySettings) -> httpx.AsyncClient:
    """Create the shared upstream HTTP client.

    The wait for response headers is bounded by the request's cancel token,
    so only connect and per-read timeouts are set here.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=settings.upstream_timeout_ms / 1000,
            read=settings.read_timeout_seconds,
            write=settings.upstream_timeout_ms / 1000,
            pool=settings.upstream_timeout_ms / 1000,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the shared HTTP client unless one was injected.

    Args:
        app: FastAPI application

    Yields:
        None
    """
    logger.info("starting_application")
    owns_client = app.state.http_client is None
    if owns_client:
        app.state.http_client = create_http_client(app.state.proxy_settings)

    yield

    logger.info("shutting_down_application")
    if owns_client:
        await app.state.http_client.aclose()
        app.state.http_client = None


def create_app(
    settings: ProxySettings | None = None,
    api_settings: APISettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Upstream settings (loaded from the environment if omitted)
        api_settings: Server settings (loaded from the environment if omitted)
        http_client: HTTP client for upstream calls (created in lifespan if omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_proxy_settings()
    api_settings = api_settings or get_api_settings()

    configure_logging(api_settings.log_level, api_settings.json_logs)

    app = FastAPI(
        title=api_settings.title,
        description=api_settings.description,
        version=api_settings.version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "chat", "description": "Streaming chat completions"},
        ],
    )
    app.state.proxy_settings = settings
    app.state.http_client = http_client

    # Register middleware (order matters - first added = last executed)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    if api_settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=api_settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(chat_router, prefix="/api")

    logger.info(
        "application_configured",
        title=api_settings.title,
        version=api_settings.version,
        upstream=settings.base_url,
        model=settings.model,
        upstream_configured=bool(settings.api_key),
    )

    return app


# Application instance
app = create_app()
