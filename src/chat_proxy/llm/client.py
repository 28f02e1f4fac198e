"""Upstream completion client.

Issues a single streaming chat completion request per client request. No
retries: a failed attempt is reported to the caller as an API error.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import httpx
import structlog

from chat_proxy.api.exceptions import UpstreamTimeoutError
from chat_proxy.api.schemas import Message

from .cancellation import CancelToken
from .config import UpstreamConfig
from .errors import map_transport_error, map_upstream_error, parse_error_message

logger = structlog.get_logger()

DEFAULT_TIMEOUT_MS = 30000


class UpstreamClient:
    """Streaming client for an OpenAI-compatible completion endpoint."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """Initialize upstream client.

        Args:
            http: Shared HTTP client
            timeout_ms: Time allowed for the upstream to start responding
        """
        self._http = http
        self._timeout_ms = timeout_ms

    @staticmethod
    def build_payload(config: UpstreamConfig, messages: Sequence[Message]) -> dict[str, object]:
        """Build the upstream request body."""
        return {
            "model": config.model,
            "messages": [message.to_upstream() for message in messages],
            "max_tokens": config.max_tokens,
            "stream": True,
        }

    async def open_stream(
        self,
        config: UpstreamConfig,
        messages: Sequence[Message],
    ) -> httpx.Response:
        """Send the completion request and wait for response headers.

        Args:
            config: Upstream target
            messages: Normalized conversation history

        Returns:
            Successful response with an unread streaming body. The caller
            owns it and must close it.

        Raises:
            UpstreamTimeoutError: If headers do not arrive within the timeout
            APIError: If the upstream responds with a non-success status
        """
        request = self._http.build_request(
            "POST",
            config.endpoint,
            json=self.build_payload(config, messages),
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "api-key": config.api_key,
                "Accept": "text/event-stream",
            },
        )

        logger.info(
            "upstream_request_config",
            endpoint=config.endpoint,
            model=config.model,
            messages=[
                {"role": message.role, "content_length": len(message.content)}
                for message in messages
            ],
            max_tokens=config.max_tokens,
        )

        start_time = time.perf_counter()
        token = CancelToken()
        send = asyncio.ensure_future(self._http.send(request, stream=True))
        token.bind(send)
        token.cancel_after(self._timeout_ms / 1000)

        try:
            response = await send
        except asyncio.CancelledError:
            if token.timed_out:
                raise UpstreamTimeoutError() from None
            raise
        except httpx.HTTPError as e:
            logger.error(
                "upstream_request_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            raise map_transport_error(e) from e
        finally:
            token.release()

        logger.info(
            "upstream_response",
            status_code=response.status_code,
            reason=response.reason_phrase,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        if not response.is_success:
            body = await self._read_error_body(response)
            logger.error(
                "upstream_api_error",
                status_code=response.status_code,
                body=body,
            )
            raise map_upstream_error(
                response.status_code,
                response.reason_phrase,
                parse_error_message(body),
            )

        return response

    @staticmethod
    async def _read_error_body(response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text
        except httpx.HTTPError:
            return ""
        finally:
            await response.aclose()
