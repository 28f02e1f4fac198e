"""Upstream client tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from chat_proxy.api.exceptions import (
    AuthError,
    RateLimitError,
    ServiceUnavailableError,
    UpstreamBadRequestError,
    UpstreamError,
    UpstreamTimeoutError,
)
from chat_proxy.api.schemas import Message
from chat_proxy.llm.client import UpstreamClient
from chat_proxy.llm.config import UpstreamConfig
from helpers import delta, sse

MockHttp = Callable[..., httpx.AsyncClient]


@pytest.fixture
def config() -> UpstreamConfig:
    """Upstream target."""
    return UpstreamConfig(
        endpoint="https://upstream.test/v1/chat/completions",
        api_key="sk-test-key-123",
        model="deepseek-reasoner",
        max_tokens=4000,
    )


@pytest.fixture
def history() -> list[Message]:
    """Normalized history."""
    return [
        Message(role="system", content="Be brief."),
        Message(role="user", content="Hi"),
    ]


class TestOpenStream:
    """Tests for UpstreamClient.open_stream."""

    @pytest.mark.asyncio
    async def test_sends_streaming_request(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """Sends model, messages, max_tokens and stream flag with bearer auth."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, content=sse("[DONE]"))

        client = UpstreamClient(mock_http(handler))
        response = await client.open_stream(config, history)
        await response.aclose()

        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == config.endpoint
        assert request.headers["Authorization"] == "Bearer sk-test-key-123"
        assert request.headers["api-key"] == "sk-test-key-123"
        assert json.loads(request.content) == {
            "model": "deepseek-reasoner",
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
            ],
            "max_tokens": 4000,
            "stream": True,
        }

    @pytest.mark.asyncio
    async def test_returns_unread_stream(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """The body is left for the caller to stream."""

        async def body():
            yield sse(delta(content="hi"), "[DONE]")

        client = UpstreamClient(mock_http(lambda request: httpx.Response(200, content=body())))
        response = await client.open_stream(config, history)

        assert response.status_code == 200
        assert not response.is_stream_consumed
        await response.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "error_type"),
        [
            (401, AuthError),
            (429, RateLimitError),
            (503, ServiceUnavailableError),
            (500, UpstreamError),
            (404, UpstreamError),
        ],
    )
    async def test_maps_error_status(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
        status_code: int,
        error_type: type[Exception],
    ) -> None:
        """Non-success statuses raise the mapped error with the same status."""
        client = UpstreamClient(
            mock_http(lambda request: httpx.Response(status_code, text="upstream says no"))
        )

        with pytest.raises(error_type) as exc_info:
            await client.open_stream(config, history)

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_bad_request_includes_upstream_message(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """400 carries the upstream error.message."""
        client = UpstreamClient(
            mock_http(
                lambda request: httpx.Response(
                    400, json={"error": {"message": "max_tokens too large"}}
                )
            )
        )

        with pytest.raises(UpstreamBadRequestError) as exc_info:
            await client.open_stream(config, history)

        assert "max_tokens too large" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_generic_error_includes_status_text(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """Other statuses mention status code and reason."""
        client = UpstreamClient(mock_http(lambda request: httpx.Response(502, text="<html>")))

        with pytest.raises(UpstreamError) as exc_info:
            await client.open_stream(config, history)

        assert "502 Bad Gateway" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_cancels_request(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """A slow upstream is cancelled and reported as a 408 timeout."""
        cancelled = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return httpx.Response(200)

        client = UpstreamClient(mock_http(handler), timeout_ms=50)

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await client.open_stream(config, history)

        assert exc_info.value.status_code == 408
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_timeout_released_after_headers(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """The deadline no longer applies once headers have arrived."""

        async def body():
            await asyncio.sleep(0.1)
            yield sse(delta(content="slow"), "[DONE]")

        client = UpstreamClient(
            mock_http(lambda request: httpx.Response(200, content=body())),
            timeout_ms=20,
        )
        response = await client.open_stream(config, history)

        data = await response.aread()

        assert b"slow" in data
        await response.aclose()

    @pytest.mark.asyncio
    async def test_connection_error(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """Transport failures before headers become a 500 upstream error."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = UpstreamClient(mock_http(handler))

        with pytest.raises(UpstreamError) as exc_info:
            await client.open_stream(config, history)

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_http_timeout_maps_to_408(
        self,
        mock_http: MockHttp,
        config: UpstreamConfig,
        history: list[Message],
    ) -> None:
        """httpx's own timeouts are reported as timeouts too."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client = UpstreamClient(mock_http(handler))

        with pytest.raises(UpstreamTimeoutError):
            await client.open_stream(config, history)
