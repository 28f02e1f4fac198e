"""Run the proxy under uvicorn."""

import uvicorn

from chat_proxy.api.config import get_api_settings


def main() -> None:
    settings = get_api_settings()
    uvicorn.run(
        "chat_proxy.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,  # Use structlog instead
    )


if __name__ == "__main__":
    main()
