"""Builders for fake upstream payloads."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
from httpx_sse import ServerSentEvent

SSE_HEADERS = {"Content-Type": "text/event-stream; charset=utf-8"}


def _data(payload: Any) -> str:
    return payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)


def sse(*payloads: Any) -> bytes:
    """Encode payloads as upstream SSE events.

    Strings are sent verbatim as the data field, anything else as JSON.
    """
    return "".join(f"data: {_data(payload)}\n\n" for payload in payloads).encode("utf-8")


def event_stream(*payloads: Any) -> httpx.Response:
    """Successful upstream response carrying the given events."""
    return httpx.Response(200, headers=SSE_HEADERS, content=sse(*payloads))


async def sse_events(*payloads: Any) -> AsyncIterator[ServerSentEvent]:
    """Yield already-decoded upstream events."""
    for payload in payloads:
        yield ServerSentEvent(data=_data(payload))


def delta(content: str | None = None, reasoning: str | None = None) -> dict[str, Any]:
    """Build a completion chunk carrying one delta."""
    body: dict[str, Any] = {}
    if content is not None:
        body["content"] = content
    if reasoning is not None:
        body["reasoning_content"] = reasoning
    return {"choices": [{"index": 0, "delta": body}]}


class UpstreamRecorder:
    """Fake upstream that records requests and replays a canned response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response or event_stream("[DONE]")
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def called(self) -> bool:
        return bool(self.requests)
