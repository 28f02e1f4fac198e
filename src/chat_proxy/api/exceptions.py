"""Custom exceptions for the proxy.

Every failure that happens before the outbound stream starts is raised as an
``APIError`` and rendered by the global handlers into a JSON error body.
"""

from fastapi import HTTPException

# Client-facing messages
INVALID_REQUEST = "Invalid request parameters"
INVALID_MESSAGE_SEQUENCE = "Invalid message sequence: user and assistant messages must alternate"
REASONING_CONTENT_NOT_ALLOWED = "Reasoning content is not allowed in message history"
MISSING_API_KEY = "API key is not configured"
INVALID_KEY = "Invalid API key. Please check your configuration."
RATE_LIMIT = "Rate limit exceeded. Please try again later."
BAD_REQUEST = "Invalid request format"
SERVICE_UNAVAILABLE = "The upstream service is temporarily unavailable. Please try again later."
UPSTREAM_DEFAULT = "Error communicating with the upstream API."
TIMEOUT = "Request timed out"
STREAM_FAILED = "Stream processing failed"
PARSE_ERROR = "Error parsing response data"


class APIError(HTTPException):
    """Base exception for API errors.

    Extends HTTPException for native FastAPI integration.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        detail: str | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Error message
            code: Error code
            status_code: HTTP status code
            detail: Additional detail information
        """
        super().__init__(
            status_code=status_code,
            detail={"message": message, "code": code, "detail": detail},
        )
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class ValidationError(APIError):
    """Malformed request, disallowed history field or broken alternation."""

    def __init__(
        self,
        message: str = INVALID_REQUEST,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class ConfigError(APIError):
    """Proxy is missing required configuration."""

    def __init__(
        self,
        message: str = MISSING_API_KEY,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="CONFIG_ERROR",
            status_code=500,
            detail=detail,
        )


class AuthError(APIError):
    """Upstream rejected the configured credential."""

    def __init__(
        self,
        message: str = INVALID_KEY,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            status_code=401,
            detail=detail,
        )


class RateLimitError(APIError):
    """Upstream rate limit exceeded."""

    def __init__(
        self,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=RATE_LIMIT,
            code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            detail=detail,
        )


class UpstreamBadRequestError(APIError):
    """Upstream refused the request body.

    The message carries the upstream-reported reason.
    """

    def __init__(
        self,
        reason: str,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=f"{BAD_REQUEST}: {reason}",
            code="UPSTREAM_BAD_REQUEST",
            status_code=400,
            detail=detail,
        )


class ServiceUnavailableError(APIError):
    """Upstream service unavailable."""

    def __init__(
        self,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=SERVICE_UNAVAILABLE,
            code="SERVICE_UNAVAILABLE",
            status_code=503,
            detail=detail,
        )


class UpstreamTimeoutError(APIError):
    """Upstream did not start responding in time."""

    def __init__(
        self,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=TIMEOUT,
            code="TIMEOUT",
            status_code=408,
            detail=detail,
        )


class UpstreamError(APIError):
    """Any other upstream failure."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="UPSTREAM_ERROR",
            status_code=status_code,
            detail=detail,
        )


class StreamFailureError(APIError):
    """Transport failure while reading the upstream body.

    Raised after the outbound stream has started, so it terminates the
    stream instead of producing an error response.
    """

    def __init__(
        self,
        detail: str | None = None,
    ) -> None:
        super().__init__(
            message=STREAM_FAILED,
            code="STREAM_FAILURE",
            status_code=500,
            detail=detail,
        )
