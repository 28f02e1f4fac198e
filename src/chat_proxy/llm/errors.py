"""Map upstream failures to API errors.

Only used before the outbound stream starts. Failures after that point are
signalled in-band by the reframer.
"""

from __future__ import annotations

import json

import httpx

from chat_proxy.api.exceptions import (
    UPSTREAM_DEFAULT,
    APIError,
    AuthError,
    RateLimitError,
    ServiceUnavailableError,
    UpstreamBadRequestError,
    UpstreamError,
    UpstreamTimeoutError,
)


def parse_error_message(body: str) -> str | None:
    """Extract ``error.message`` from an upstream error body.

    Args:
        body: Raw response body

    Returns:
        The upstream message, or None if the body is not in the expected shape
    """
    try:
        payload = json.loads(body)
    except ValueError:
        return None

    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def map_upstream_error(
    status_code: int,
    reason_phrase: str = "",
    upstream_message: str | None = None,
) -> APIError:
    """Translate a non-success upstream status into an API error.

    Args:
        status_code: Upstream HTTP status
        reason_phrase: Upstream status text
        upstream_message: Message reported by the upstream, if any

    Returns:
        The error to raise for the client
    """
    message = upstream_message or UPSTREAM_DEFAULT

    if status_code == 401:
        return AuthError()
    if status_code == 429:
        return RateLimitError(detail=upstream_message)
    if status_code == 400:
        return UpstreamBadRequestError(reason=message)
    if status_code == 503:
        return ServiceUnavailableError(detail=upstream_message)

    return UpstreamError(
        message=f"{UPSTREAM_DEFAULT} ({status_code} {reason_phrase}): {message}",
        status_code=status_code,
    )


def map_transport_error(exc: httpx.HTTPError) -> APIError:
    """Translate a failure to obtain an upstream response.

    Args:
        exc: httpx error raised while sending the request

    Returns:
        The error to raise for the client
    """
    if isinstance(exc, httpx.TimeoutException):
        return UpstreamTimeoutError(detail=str(exc) or None)
    return UpstreamError(message=UPSTREAM_DEFAULT, status_code=500, detail=str(exc) or None)
