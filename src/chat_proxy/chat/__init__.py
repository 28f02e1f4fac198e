"""Chat request handling: validation, history normalization, orchestration."""

from .history import build_message_history, normalize_messages, validate_message_sequence
from .validation import parse_chat_request, validate_no_reasoning_content

__all__ = [
    "build_message_history",
    "normalize_messages",
    "parse_chat_request",
    "validate_message_sequence",
    "validate_no_reasoning_content",
]
