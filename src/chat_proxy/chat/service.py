"""Chat request orchestration.

Everything that can fail before the upstream starts streaming happens in
``open_chat_stream`` and surfaces as an ``APIError``. The returned stream is
lazy and only reads from the upstream as the client consumes it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import structlog

from chat_proxy.api.config import ProxySettings
from chat_proxy.llm.client import UpstreamClient
from chat_proxy.llm.config import resolve_upstream_config
from chat_proxy.llm.reframer import reframe_stream
from chat_proxy.llm.tags import encode_stream

from .history import build_message_history
from .validation import parse_chat_request

logger = structlog.get_logger()


async def open_chat_stream(
    body: bytes,
    settings: ProxySettings,
    upstream: UpstreamClient,
) -> AsyncIterator[bytes]:
    """Validate a chat request and open the upstream stream.

    Args:
        body: Raw request body
        settings: Upstream settings
        upstream: Client used for the single upstream attempt

    Returns:
        Encoded outbound stream

    Raises:
        APIError: On validation, configuration or upstream failure
    """
    request = parse_chat_request(body)
    history = build_message_history(request.prompt, request.messages, request.input)
    config = resolve_upstream_config(settings)

    logger.info(
        "chat_request_accepted",
        history_length=len(history),
        client_messages=len(request.messages),
    )

    response = await upstream.open_stream(config, history)
    return encode_stream(reframe_stream(response))
