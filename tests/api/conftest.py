"""API test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chat_proxy.api.config import APISettings, ProxySettings
from chat_proxy.api.main import create_app


@pytest.fixture
def make_client(
    proxy_settings: ProxySettings,
    api_settings: APISettings,
) -> Callable[..., TestClient]:
    """Factory for test clients wired to a fake upstream."""

    def factory(
        handler: Callable[[httpx.Request], Any],
        settings: ProxySettings | None = None,
    ) -> TestClient:
        app: FastAPI = create_app(
            settings=settings or proxy_settings,
            api_settings=api_settings,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        return TestClient(app, raise_server_exceptions=False)

    return factory


@pytest.fixture
def chat_body() -> dict[str, Any]:
    """Valid chat request body."""
    return {
        "prompt": "You are helpful.",
        "messages": [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
        ],
        "input": "What is 2 + 2?",
    }
