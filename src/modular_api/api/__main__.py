"""
modular_api.api.__main__

Entrypoint for running the FastAPI application via `python -m modular_api.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
- Abort when module provisioning fails during startup.
"""

from __future__ import annotations

import uvicorn

from modular_api.api.app import create_app
from modular_api.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
        # "on": a failed migration during lifespan startup stops the server instead of
        # being treated as a missing lifespan handler.
        lifespan="on",
    )


if __name__ == "__main__":
    main()
