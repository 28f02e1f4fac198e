"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from chat_proxy.api.config import APISettings, ProxySettings

Handler = Callable[[httpx.Request], Any]


@pytest.fixture
def proxy_settings() -> ProxySettings:
    """Upstream settings pointing at a fake upstream."""
    return ProxySettings(
        api_key="sk-test-key-123",
        base_url="https://upstream.test",
        model="deepseek-chat",
        upstream_timeout_ms=2000,
        _env_file=None,
    )


@pytest.fixture
def api_settings() -> APISettings:
    """Server settings for tests."""
    return APISettings(
        cors_origins=[],
        json_logs=False,
        _env_file=None,
    )


@pytest.fixture
def mock_http() -> Callable[[Handler], httpx.AsyncClient]:
    """Factory for HTTP clients backed by a request handler."""

    def factory(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
