"""Tagged text format of the outbound stream.

Each chunk is written as ``[Reasoning]...[/Reasoning]`` or
``[Content]...[/Content]``. Notices are written as a bare line.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterable, AsyncIterator

from .schemas import ChunkKind, ProxyChunk

REASONING_OPEN = "[Reasoning]"
REASONING_CLOSE = "[/Reasoning]"
CONTENT_OPEN = "[Content]"
CONTENT_CLOSE = "[/Content]"

_REASONING_RE = re.compile(r"\[Reasoning\]([\s\S]*?)\[/Reasoning\]")
_CONTENT_RE = re.compile(r"\[Content\]([\s\S]*?)\[/Content\]")


def encode_chunk(chunk: ProxyChunk) -> bytes:
    """Encode one chunk as UTF-8 tagged text."""
    if chunk.kind is ChunkKind.REASONING:
        text = f"{REASONING_OPEN}{chunk.text}{REASONING_CLOSE}"
    elif chunk.kind is ChunkKind.CONTENT:
        text = f"{CONTENT_OPEN}{chunk.text}{CONTENT_CLOSE}"
    else:
        text = f"{chunk.text}\n"
    return text.encode("utf-8")


async def encode_stream(chunks: AsyncIterable[ProxyChunk]) -> AsyncIterator[bytes]:
    """Lazily encode a chunk stream for the HTTP response body."""
    async for chunk in chunks:
        yield encode_chunk(chunk)


def decode_tagged_stream(text: str) -> tuple[str, str]:
    """Split tagged text back into reasoning and content.

    Reasoning segments holding the literal ``null`` are dropped, as some
    upstreams emit it for empty reasoning deltas.

    Args:
        text: Accumulated outbound stream text

    Returns:
        Tuple of (reasoning, content), each the concatenation of its segments
    """
    thoughts = [t for t in _REASONING_RE.findall(text) if t and t != "null"]
    contents = [c for c in _CONTENT_RE.findall(text) if c]
    return "".join(thoughts), "".join(contents)
