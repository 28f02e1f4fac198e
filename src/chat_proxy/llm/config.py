"""Upstream configuration resolution."""

from dataclasses import dataclass

from chat_proxy.api.config import ProxySettings
from chat_proxy.api.exceptions import ConfigError

MAX_TOKENS = 4000
COMPLETIONS_PATH = "/v1/chat/completions"


@dataclass(frozen=True)
class UpstreamConfig:
    """Immutable upstream target for a single request."""

    endpoint: str
    api_key: str
    model: str
    max_tokens: int = MAX_TOKENS


def resolve_upstream_config(settings: ProxySettings) -> UpstreamConfig:
    """Build the upstream config from process settings.

    Args:
        settings: Settings loaded at process start

    Returns:
        Upstream configuration for one request

    Raises:
        ConfigError: If no API key is configured
    """
    if not settings.api_key:
        raise ConfigError()

    return UpstreamConfig(
        endpoint=f"{settings.base_url.rstrip('/')}{COMPLETIONS_PATH}",
        api_key=settings.api_key,
        model=settings.model,
        max_tokens=MAX_TOKENS,
    )
