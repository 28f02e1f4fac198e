"""Streaming chat endpoint."""

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from chat_proxy.chat.service import open_chat_stream

from ..dependencies import Settings, Upstream
from ..schemas import ErrorResponse

router = APIRouter(tags=["chat"])

STREAM_MEDIA_TYPE = "text/event-stream"


@router.post(
    "/chat",
    response_class=StreamingResponse,
    summary="Stream a chat completion",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        408: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def chat(
    request: Request,
    settings: Settings,
    upstream: Upstream,
) -> StreamingResponse:
    """Proxy a chat request to the upstream model.

    The body is read and validated by hand so that malformed input is
    reported as 400 with the proxy's own error body.

    Returns:
        Tagged stream of ``[Reasoning]...[/Reasoning]`` and
        ``[Content]...[/Content]`` segments
    """
    body = await request.body()
    stream = await open_chat_stream(body, settings, upstream)
    return StreamingResponse(stream, media_type=STREAM_MEDIA_TYPE)
