"""Inbound request validation."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError as PydanticValidationError

from chat_proxy.api.exceptions import REASONING_CONTENT_NOT_ALLOWED, ValidationError
from chat_proxy.api.schemas import ChatRequest, Message


def parse_chat_request(body: bytes | str) -> ChatRequest:
    """Decode and shape-check a chat request body.

    Args:
        body: Raw request body

    Returns:
        Parsed request

    Raises:
        ValidationError: If the body is not JSON, a required field is empty or
            missing, ``messages`` is not a list of messages, or any message
            carries reasoning content
    """
    try:
        request = ChatRequest.model_validate_json(body)
    except PydanticValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"{loc}: {error['msg']}" if loc else error["msg"])
        raise ValidationError(detail="; ".join(errors)) from e

    validate_no_reasoning_content(request.messages)
    return request


def validate_no_reasoning_content(messages: Iterable[Message]) -> None:
    """Reject history that carries model reasoning output.

    Raises:
        ValidationError: If any message has non-empty ``reasoning_content``
    """
    for index, message in enumerate(messages):
        if message.reasoning_content:
            raise ValidationError(
                message=REASONING_CONTENT_NOT_ALLOWED,
                detail=f"messages.{index}.reasoning_content",
            )
