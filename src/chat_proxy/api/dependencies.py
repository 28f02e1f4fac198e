"""FastAPI dependencies for dependency injection."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from chat_proxy.llm.client import UpstreamClient

from .config import ProxySettings


def get_settings(request: Request) -> ProxySettings:
    """Upstream settings loaded when the app was created."""
    return request.app.state.proxy_settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared HTTP client for upstream calls."""
    return request.app.state.http_client


def get_upstream_client(
    settings: Annotated[ProxySettings, Depends(get_settings)],
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> UpstreamClient:
    """Upstream client dependency.

    Args:
        settings: Upstream settings from DI
        http: Shared HTTP client from DI

    Returns:
        UpstreamClient bound to the configured timeout
    """
    return UpstreamClient(http, timeout_ms=settings.upstream_timeout_ms)


# Type aliases for cleaner route signatures
Settings = Annotated[ProxySettings, Depends(get_settings)]
Upstream = Annotated[UpstreamClient, Depends(get_upstream_client)]
