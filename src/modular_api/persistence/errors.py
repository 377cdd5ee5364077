"""
modular_api.persistence.errors

Exception taxonomy for persistence provisioning.

Every error here is raised during startup wiring or migration and is expected to
abort the process; none of them is retried.
"""

from __future__ import annotations


class PersistenceError(Exception):
    """Base class for persistence provisioning failures."""


class ConfigurationError(PersistenceError):
    """Unsupported provider, unusable connection string, or misordered/conflicting wiring."""


class MigrationError(PersistenceError):
    """A module's schema could not be brought current."""

    def __init__(self, message: str, *, module: str) -> None:
        super().__init__(message)
        self.module = module
