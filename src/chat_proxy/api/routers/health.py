"""Health check endpoints.

- /health (liveness): Is the app process alive?
- /ready (readiness): Is an upstream credential configured?
"""

from fastapi import APIRouter

from chat_proxy import __version__

from ..dependencies import Settings
from ..schemas import LivenessResponse, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=LivenessResponse)
async def health_check() -> LivenessResponse:
    """Liveness probe.

    Does NOT contact the upstream API.
    """
    return LivenessResponse(status="healthy", version=__version__)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(settings: Settings) -> ReadinessResponse:
    """Readiness probe.

    Reports ``degraded`` when no upstream credential is configured.
    """
    configured = bool(settings.api_key)
    return ReadinessResponse(
        status="ready" if configured else "degraded",
        upstream_configured=configured,
    )
