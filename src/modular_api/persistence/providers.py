"""
modular_api.persistence.providers

Database provider selection.

Responsibilities:
- Map a configured provider key onto a concrete async SQLAlchemy URL + engine options.
- Tag the result with the module's own revision directory and version table so
  modules sharing one physical database are migrated independently.
- Fail loudly for providers outside the supported set.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from modular_api.persistence.errors import ConfigurationError

# Shared Alembic environment (env.py); per-module revisions live under versions/<module>/.
MIGRATIONS_ROOT = Path(__file__).resolve().parent.parent / "migrations"


class DbProviderKeys(enum.StrEnum):
    # Values are what operators put in MODAPI_DB_CONFIG__PROVIDER (case-insensitive).
    postgresql = "POSTGRESQL"
    sqlite = "SQLITE"


@dataclass(frozen=True, slots=True)
class _ProviderProfile:
    backend: str
    driver: str
    engine_options: Mapping[str, Any]


_PROFILES: dict[DbProviderKeys, _ProviderProfile] = {
    DbProviderKeys.postgresql: _ProviderProfile(
        backend="postgresql",
        driver="postgresql+asyncpg",
        # pool_pre_ping helps detect stale connections in long-lived processes.
        engine_options={"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10, "pool_recycle": 1800},
    ),
    DbProviderKeys.sqlite: _ProviderProfile(
        backend="sqlite",
        driver="sqlite+aiosqlite",
        engine_options={},
    ),
}


@dataclass(frozen=True, slots=True)
class EngineConfiguration:
    provider: DbProviderKeys
    module: str
    url: URL
    script_location: Path
    migrations_location: Path
    version_table: str
    engine_options: Mapping[str, Any] = field(default_factory=dict)


class ProviderResolver:
    def __init__(self, migrations_root: Path = MIGRATIONS_ROOT) -> None:
        self._migrations_root = migrations_root

    @property
    def migrations_root(self) -> Path:
        return self._migrations_root

    def ensure_supported(self, provider_id: str) -> DbProviderKeys:
        try:
            return DbProviderKeys(provider_id.strip().upper())
        except ValueError:
            raise ConfigurationError(f"DB provider {provider_id} is not supported.") from None

    def resolve(self, provider_id: str, connection_string: str, *, module: str) -> EngineConfiguration:
        """
        Build the engine configuration for `module` on the given provider.

        Pure: no engine is created and no connection is opened.
        """

        if provider_id is None or connection_string is None:
            raise TypeError("provider_id and connection_string are required")

        provider = self.ensure_supported(provider_id)
        profile = _PROFILES[provider]
        try:
            url = make_url(connection_string)
        except ArgumentError as e:
            raise ConfigurationError(
                f"invalid connection string for DB provider {provider}: {e}"
            ) from e
        if url.get_backend_name() != profile.backend:
            raise ConfigurationError(
                f"connection string backend '{url.get_backend_name()}' does not match DB provider {provider}"
            )

        slug = module.lower()
        return EngineConfiguration(
            provider=provider,
            module=module,
            url=url.set(drivername=profile.driver),
            script_location=self._migrations_root,
            migrations_location=self._migrations_root / "versions" / slug,
            version_table=f"{slug}_alembic_version",
            engine_options=dict(profile.engine_options),
        )


# --- Module Notes -----------------------------------------------------------
# Adding a provider means adding a key, a profile, and making sure its async driver
# is declared in pyproject.toml; revisions are dialect-neutral Alembic scripts.
