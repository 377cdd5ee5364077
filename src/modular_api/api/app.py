"""
modular_api.api.app

FastAPI app factory for the modular API service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Wire persistence: load `DbConfig`, bind every module context, migrate on startup.
- Dispose module engines on shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from modular_api import __version__
from modular_api.api.routers.health import router as health_router
from modular_api.modules import bind_modules
from modular_api.modules.catalog.router import router as catalog_router
from modular_api.observability.logging import configure_logging, get_logger
from modular_api.observability.middleware import RequestContextMiddleware
from modular_api.persistence.binder import ContextBinder
from modular_api.persistence.migrations import MigrationRunner, provision
from modular_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env == "prod",
    )

    # Wiring is sequential and happens before any request; an unsupported provider or
    # a module label collision fails here.
    binder = bind_modules(ContextBinder(settings.db_config))
    runner = MigrationRunner(binder)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        try:
            # MigrationError/ConfigurationError propagate: the app must not serve traffic.
            await provision(binder, runner)
            yield
        finally:
            await binder.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Modular API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.persistence = binder
    app.state.migrations = runner

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(catalog_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; module logic stays
# in `modular_api.modules.*`.
