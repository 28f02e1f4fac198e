"""Response schemas for API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str
    code: str | None = None
    detail: str | None = None
    request_id: str | None = None


class LivenessResponse(BaseModel):
    """Liveness check response."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ready", "degraded"]
    upstream_configured: bool
