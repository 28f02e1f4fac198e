"""Stream event and outbound chunk types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class DoneEvent:
    """Upstream ``[DONE]`` sentinel."""


@dataclass(frozen=True)
class KeepAliveEvent:
    """Upstream keep-alive payload."""


@dataclass(frozen=True)
class DeltaEvent:
    """Incremental model output from ``choices[0].delta``."""

    content: str | None = None
    reasoning: str | None = None


StreamEvent = DoneEvent | KeepAliveEvent | DeltaEvent


class ChunkKind(StrEnum):
    """Outbound chunk kinds."""

    REASONING = "reasoning"
    CONTENT = "content"
    NOTICE = "notice"


@dataclass(frozen=True)
class ProxyChunk:
    """One outbound segment of the tagged stream."""

    kind: ChunkKind
    text: str

    @classmethod
    def reasoning(cls, text: str) -> ProxyChunk:
        return cls(ChunkKind.REASONING, text)

    @classmethod
    def content(cls, text: str) -> ProxyChunk:
        return cls(ChunkKind.CONTENT, text)

    @classmethod
    def notice(cls, text: str) -> ProxyChunk:
        return cls(ChunkKind.NOTICE, text)
