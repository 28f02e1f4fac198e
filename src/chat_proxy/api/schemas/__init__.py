"""API request/response schemas."""

from .requests import ChatRequest, Message, Role
from .responses import ErrorResponse, LivenessResponse, ReadinessResponse

__all__ = [
    "ChatRequest",
    "Message",
    "Role",
    "ErrorResponse",
    "LivenessResponse",
    "ReadinessResponse",
]
