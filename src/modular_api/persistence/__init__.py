"""
modular_api.persistence

Per-module persistence provisioning (SQLAlchemy async + Alembic).

Responsibilities:
- Select a database provider and build engine configurations.
- Bind one persistence context per application module.
- Apply each module's pending migrations at startup.
"""

from modular_api.persistence.binder import ContextBinder, ContextRegistration
from modular_api.persistence.context import (
    ContextOptions,
    DbContext,
    PersistenceContext,
    derive_module_label,
)
from modular_api.persistence.errors import ConfigurationError, MigrationError, PersistenceError
from modular_api.persistence.migrations import (
    MigrationOutcome,
    MigrationRunner,
    ModuleState,
    provision,
)
from modular_api.persistence.providers import DbProviderKeys, EngineConfiguration, ProviderResolver

__all__ = [
    "ConfigurationError",
    "ContextBinder",
    "ContextOptions",
    "ContextRegistration",
    "DbContext",
    "DbProviderKeys",
    "EngineConfiguration",
    "MigrationError",
    "MigrationOutcome",
    "MigrationRunner",
    "ModuleState",
    "PersistenceContext",
    "PersistenceError",
    "ProviderResolver",
    "derive_module_label",
    "provision",
]
