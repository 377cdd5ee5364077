"""
modular_api.persistence.context

Per-module persistence contexts.

Responsibilities:
- Derive a module label from a context class name (`CatalogDbContext` -> `CATALOG`).
- Define the `PersistenceContext` capability the migration runner operates on.
- Provide `DbContext`, the base class each module subclasses with its own metadata:
  a unit-of-work session plus Alembic-backed pending/apply migration operations.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar, Protocol, runtime_checkable

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import Connection, MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from modular_api.persistence.errors import ConfigurationError, PersistenceError
from modular_api.persistence.providers import EngineConfiguration

_CONTEXT_SUFFIX = re.compile(r"(?:db)?context$", re.IGNORECASE)


def derive_module_label(type_name: str) -> str:
    """Strip a trailing `DbContext`/`Context` token (any casing) and upper-case the rest."""

    label = _CONTEXT_SUFFIX.sub("", type_name.strip()).upper()
    if not label:
        raise ConfigurationError(f"cannot derive a module label from context type '{type_name}'")
    return label


@runtime_checkable
class PersistenceContext(Protocol):
    @property
    def type_label(self) -> str: ...

    async def has_pending_migrations(self) -> bool: ...

    async def apply_migrations(self) -> None: ...

    async def close(self) -> None: ...


@dataclass(frozen=True, slots=True)
class ContextOptions:
    module: str
    in_memory: bool
    store_name: str | None = None
    engine_configuration: EngineConfiguration | None = None


class DbContext:
    """
    Unit-of-work handle for one module's schema.

    Instances are created by `ContextBinder` (one per scope) and must be closed;
    `ContextBinder.scope()` does that on every exit path.
    """

    # Tables owned by this module; subclasses point this at their declarative Base.
    metadata: ClassVar[MetaData]

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
        options: ContextOptions,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory
        self._options = options
        self._session: AsyncSession | None = None
        self._closed = False

    @classmethod
    def module_label(cls) -> str:
        return derive_module_label(cls.__name__)

    @property
    def type_label(self) -> str:
        return self._options.module

    @property
    def options(self) -> ContextOptions:
        return self._options

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def session(self) -> AsyncSession:
        # Lazily opened so contexts used only for migrations never hold a session.
        if self._closed:
            raise PersistenceError(f"{type(self).__name__} is closed")
        if self._session is None:
            self._session = self._session_factory()
        return self._session

    # --- schema -------------------------------------------------------------

    async def get_pending_migrations(self) -> list[str]:
        """Revision ids not yet recorded in this module's version table, oldest first."""

        cfg = self._alembic_config()
        async with self._engine.connect() as conn:
            return await conn.run_sync(_pending_revisions, cfg)

    async def has_pending_migrations(self) -> bool:
        return bool(await self.get_pending_migrations())

    async def apply_migrations(self) -> None:
        cfg = self._alembic_config()
        # One transaction for the whole upgrade; Alembic joins it instead of opening its own.
        async with self._engine.begin() as conn:
            await conn.run_sync(_upgrade_to_heads, cfg)

    async def ensure_created(self) -> None:
        """Create this module's tables directly from metadata (in-memory stores only)."""

        if not self._options.in_memory:
            raise ConfigurationError(
                f"{self.type_label}: schema is managed by migrations on a real provider"
            )
        async with self._engine.begin() as conn:
            await conn.run_sync(self.metadata.create_all)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
        self._closed = True

    def _alembic_config(self) -> Config:
        engine_configuration = self._options.engine_configuration
        if engine_configuration is None:
            raise ConfigurationError(f"{self.type_label}: in-memory stores have no migrations")

        cfg = Config()
        # ConfigParser interpolation: escape '%' in filesystem paths.
        cfg.set_main_option("script_location", str(engine_configuration.script_location).replace("%", "%%"))
        cfg.set_main_option(
            "version_locations", str(engine_configuration.migrations_location).replace("%", "%%")
        )
        # Split version_locations on os.pathsep so paths containing spaces survive.
        cfg.set_main_option("path_separator", "os")
        cfg.set_main_option("version_table", engine_configuration.version_table)
        cfg.attributes["target_metadata"] = self.metadata
        return cfg


def _pending_revisions(connection: Connection, cfg: Config) -> list[str]:
    script = ScriptDirectory.from_config(cfg)
    migration_context = MigrationContext.configure(
        connection, opts={"version_table": cfg.get_main_option("version_table")}
    )
    applied = _ancestry(script, migration_context.get_current_heads())
    # walk_revisions() goes head -> base; report oldest first.
    return [rev.revision for rev in reversed(list(script.walk_revisions())) if rev.revision not in applied]


def _ancestry(script: ScriptDirectory, heads: Iterable[str]) -> set[str]:
    seen: set[str] = set()
    stack = list(heads)
    while stack:
        revision = stack.pop()
        if revision in seen:
            continue
        seen.add(revision)
        down = script.get_revision(revision).down_revision
        if isinstance(down, str):
            stack.append(down)
        elif down:
            stack.extend(down)
    return seen


def _upgrade_to_heads(connection: Connection, cfg: Config) -> None:
    # env.py picks the connection up from config.attributes.
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "heads")


# --- Module Notes -----------------------------------------------------------
# SQLite runs DDL outside the surrounding transaction, so a failed upgrade there may
# leave earlier statements applied; PostgreSQL rolls the whole upgrade back.
