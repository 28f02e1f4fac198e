"""API configuration settings.

Provides settings for the upstream completion API and for the HTTP server.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProxySettings(BaseSettings):
    """Upstream completion API settings."""

    api_key: str | None = Field(
        default=None,
        validation_alias="DEEPSEEK_API_KEY",
        description="Bearer credential for the upstream API",
    )
    base_url: str = Field(
        default="https://api.deepseek.com",
        validation_alias=AliasChoices("DEEPSEEKAPI_BASE_URL", "DEEPSEEK_BASE_URL"),
        description="Upstream API base URL",
    )
    model: str = Field(
        default="deepseek-chat",
        validation_alias="DEEPSEEK_MODEL",
        description="Upstream model identifier",
    )
    upstream_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Time allowed for the upstream to start responding",
    )
    read_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Time allowed for a single read of the upstream body",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


class APISettings(BaseSettings):
    """General API settings."""

    title: str = Field(
        default="Chat Proxy",
        description="API title",
    )
    description: str = Field(
        default="Streaming proxy for reasoning chat completions",
        description="API description",
    )
    version: str = Field(
        default="0.1.0",
        description="API version",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8000, description="Bind port")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )
    log_level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=True, description="Render logs as JSON lines")

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_proxy_settings() -> ProxySettings:
    """Get cached upstream settings."""
    return ProxySettings()


@lru_cache
def get_api_settings() -> APISettings:
    """Get cached API settings."""
    return APISettings()
