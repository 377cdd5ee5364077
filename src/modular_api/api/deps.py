"""
modular_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide a dependency for the context binder held on the app.
- Provide request-scoped module contexts (closed when the request ends).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any

from fastapi import Depends, Request

from modular_api.persistence.binder import ContextBinder
from modular_api.persistence.context import DbContext


def binder_from_app(request: Request) -> ContextBinder:
    # The binder is created in `modular_api.api.app.create_app`.
    return request.app.state.persistence  # type: ignore[attr-defined]


def context_dep(context_type: type[DbContext]) -> Callable[..., AsyncIterator[Any]]:
    """Dependency factory yielding one `context_type` instance per request."""

    async def _context(
        binder: ContextBinder = Depends(binder_from_app),
    ) -> AsyncIterator[DbContext]:
        # Commit/rollback is managed explicitly by the endpoint or handler.
        async with binder.scope(context_type) as context:
            yield context

    return _context


# --- Module Notes -----------------------------------------------------------
# Endpoints declare the module context they need (`Depends(context_dep(...))`)
# instead of reaching for a shared session.
