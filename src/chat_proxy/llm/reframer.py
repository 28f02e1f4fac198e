"""Re-frame the upstream SSE stream into tagged chunks.

Each upstream event is handled as soon as it is parsed:

- ``[DONE]`` ends the outbound stream
- ``keep-alive`` is ignored
- anything else is parsed as a completion chunk and its delta is emitted as
  a reasoning chunk and/or a content chunk, reasoning first
- a payload that is not JSON emits a single parse-error notice and ends the
  outbound stream

Transport failures while reading raise ``StreamFailureError``. Nothing is
buffered beyond the current event, so the consumer paces upstream reads.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

import httpx
import structlog
from httpx_sse import EventSource, ServerSentEvent

from chat_proxy.api.exceptions import PARSE_ERROR, StreamFailureError

from .schemas import DeltaEvent, DoneEvent, KeepAliveEvent, ProxyChunk, StreamEvent

logger = structlog.get_logger()

DONE_SENTINEL = "[DONE]"
KEEP_ALIVE = "keep-alive"


def parse_stream_event(data: str) -> StreamEvent | None:
    """Classify one upstream event payload.

    Args:
        data: The event's data field

    Returns:
        The parsed event, or None if the payload carries no delta

    Raises:
        ValueError: If the payload is not valid JSON
    """
    if data == DONE_SENTINEL:
        return DoneEvent()
    if data == KEEP_ALIVE:
        return KeepAliveEvent()

    payload = json.loads(data)
    delta = _first_delta(payload)
    if delta is None:
        return None
    return DeltaEvent(
        content=_text(delta.get("content")),
        reasoning=_text(delta.get("reasoning_content")),
    )


def _first_delta(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    return delta if isinstance(delta, dict) else None


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


async def reframe_events(events: AsyncIterable[ServerSentEvent]) -> AsyncIterator[ProxyChunk]:
    """Re-frame decoded upstream events into outbound chunks.

    Args:
        events: Upstream server-sent events, in arrival order

    Yields:
        Outbound chunks in upstream event order

    Raises:
        StreamFailureError: If reading the upstream body fails
    """
    logger.info("upstream_stream_start")

    try:
        async for event in events:
            if not event.data:
                continue
            try:
                parsed = parse_stream_event(event.data)
            except (ValueError, RecursionError) as e:
                logger.error(
                    "upstream_parse_error",
                    error_type=type(e).__name__,
                    raw=event.data[:200],
                )
                yield ProxyChunk.notice(PARSE_ERROR)
                return

            if isinstance(parsed, DoneEvent):
                logger.info("upstream_stream_complete")
                return
            if isinstance(parsed, KeepAliveEvent):
                logger.debug("upstream_keep_alive")
                continue
            if parsed is None:
                logger.warning("upstream_empty_delta", raw=event.data)
                continue

            if parsed.reasoning:
                yield ProxyChunk.reasoning(parsed.reasoning)
            if parsed.content:
                yield ProxyChunk.content(parsed.content)
    except httpx.HTTPError as e:
        logger.error(
            "upstream_stream_failed",
            error_type=type(e).__name__,
            error=str(e),
        )
        raise StreamFailureError(detail=str(e) or None) from e

    # Upstream closed without [DONE]; treated as a normal end
    logger.warning("upstream_stream_ended_without_done")


async def reframe_stream(response: httpx.Response) -> AsyncIterator[ProxyChunk]:
    """Re-frame a successful upstream response.

    The response is closed when the generator finishes, fails or is closed
    by its consumer. A body that is not ``text/event-stream`` fails with
    ``StreamFailureError``.

    Args:
        response: Streaming upstream response with an unread body

    Yields:
        Outbound chunks
    """
    events = EventSource(response).aiter_sse()
    try:
        async for chunk in reframe_events(events):
            yield chunk
    finally:
        await events.aclose()
        await response.aclose()
