"""Request schemas for API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """A single conversation turn.

    ``reasoning_content`` is produced by the model and is only accepted here
    so that it can be rejected with a clear error when clients echo it back.
    """

    role: Role
    content: str
    reasoning_content: str | None = None

    def to_upstream(self) -> dict[str, str]:
        """Serialize for the upstream completion API."""
        return {"role": self.role, "content": self.content}


class ChatRequest(BaseModel):
    """Request body for the chat endpoint."""

    prompt: str = Field(..., min_length=1, description="System prompt")
    messages: list[Message] = Field(..., description="Prior conversation turns")
    input: str = Field(..., min_length=1, description="New user turn")
