"""Upstream completion API integration.

- config: resolve the per-request upstream configuration
- client: issue the streaming completion request
- errors: map upstream failures to API errors
- reframer: turn the upstream event stream into tagged chunks
"""

from .client import UpstreamClient
from .config import MAX_TOKENS, UpstreamConfig, resolve_upstream_config
from .reframer import reframe_stream

__all__ = [
    "MAX_TOKENS",
    "UpstreamClient",
    "UpstreamConfig",
    "reframe_stream",
    "resolve_upstream_config",
]
