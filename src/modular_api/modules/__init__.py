"""
modular_api.modules

Application modules, each owning its own schema and revision history.

Responsibilities:
- List the persistence contexts the application binds at startup.
"""

from __future__ import annotations

from modular_api.modules.catalog.context import CatalogDbContext
from modular_api.modules.ordering.context import OrderingDbContext
from modular_api.persistence.binder import ContextBinder
from modular_api.persistence.context import DbContext

# Order is irrelevant: modules are bound and migrated independently.
MODULE_CONTEXTS: tuple[type[DbContext], ...] = (CatalogDbContext, OrderingDbContext)


def bind_modules(binder: ContextBinder) -> ContextBinder:
    for context_type in MODULE_CONTEXTS:
        binder.bind(context_type)
    return binder
