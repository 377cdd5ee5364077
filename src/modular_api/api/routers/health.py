"""
modular_api.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) checking every module's database and schema state.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from modular_api.api.deps import binder_from_app
from modular_api.persistence.binder import ContextBinder
from modular_api.persistence.migrations import MigrationRunner, ModuleState

router = APIRouter()

_READY_STATES = frozenset(
    {ModuleState.in_memory_ready, ModuleState.schema_current, ModuleState.schema_migrated}
)


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request, binder: ContextBinder = Depends(binder_from_app)) -> Any:
    # Readiness: every module is migrated and its database answers.
    runner: MigrationRunner = request.app.state.migrations
    modules: dict[str, str] = {}
    ready = True
    for context_type in binder.bound_types:
        state = runner.state_of(context_type)
        modules[context_type.module_label()] = state.value
        if state not in _READY_STATES:
            ready = False
            continue
        async with binder.scope(context_type) as context:
            await context.session.execute(text("SELECT 1"))

    body = {"status": "ready" if ready else "not_ready", "modules": modules}
    return body if ready else JSONResponse(status_code=503, content=body)
