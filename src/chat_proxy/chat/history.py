"""Conversation history normalization.

The upstream API requires strictly alternating turns after the system
prompt, so consecutive turns with the same role are merged.
"""

from __future__ import annotations

from collections.abc import Sequence

from chat_proxy.api.exceptions import INVALID_MESSAGE_SEQUENCE, ValidationError
from chat_proxy.api.schemas import Message


def build_message_history(
    prompt: str,
    messages: Sequence[Message],
    user_input: str,
) -> list[Message]:
    """Build the normalized message list to send upstream.

    Args:
        prompt: System prompt
        messages: Prior conversation turns
        user_input: New user turn

    Returns:
        System message followed by strictly alternating turns
    """
    history = [
        Message(role="system", content=prompt),
        *messages,
        Message(role="user", content=user_input),
    ]
    return normalize_messages(history)


def normalize_messages(messages: Sequence[Message]) -> list[Message]:
    """Merge consecutive same-role turns.

    Contents are joined with a newline. Input messages are not modified.

    Raises:
        ValidationError: If the merged sequence still has adjacent turns with
            the same role
    """
    normalized: list[Message] = []
    for message in messages:
        if normalized and normalized[-1].role == message.role:
            previous = normalized[-1]
            normalized[-1] = previous.model_copy(
                update={"content": f"{previous.content}\n{message.content}"}
            )
        else:
            normalized.append(message.model_copy())

    # Safety net; the merge above should never leave a same-role pair
    validate_message_sequence(normalized)
    return normalized


def validate_message_sequence(messages: Sequence[Message]) -> None:
    """Check that adjacent messages never share a role.

    Raises:
        ValidationError: On the first adjacent pair with the same role
    """
    for i in range(1, len(messages)):
        if messages[i].role == messages[i - 1].role:
            raise ValidationError(message=INVALID_MESSAGE_SEQUENCE, detail=f"messages.{i}")
