"""
modular_api.persistence.binder

Registration of per-module persistence contexts.

Responsibilities:
- Hold the loaded `DbConfig` (loaded once, read-only afterwards).
- Register one lazily-resolved factory per `DbContext` subclass.
- On first resolution, attach either a named in-memory store or a provider engine.
- Hand out scoped context instances that are always closed.

Preconditions:
- `load_config()` must run before the first `create()`/`scope()`; binding may
  happen before or after it.
"""

from __future__ import annotations

import threading
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import NamedTuple, TypeVar

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from modular_api.observability.logging import get_logger
from modular_api.persistence.context import ContextOptions, DbContext
from modular_api.persistence.errors import ConfigurationError
from modular_api.persistence.providers import ProviderResolver
from modular_api.persistence.session import (
    create_engine,
    create_in_memory_engine,
    create_sessionmaker,
)
from modular_api.settings import DbConfig

TContext = TypeVar("TContext", bound=DbContext)

_Build = Callable[[str], tuple[AsyncEngine, ContextOptions]]


class _Resolved(NamedTuple):
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    options: ContextOptions


class ContextRegistration:
    """Lazily-built engine + session factory for one bound context type."""

    def __init__(self, context_type: type[DbContext], module: str, build: _Build) -> None:
        self.context_type = context_type
        self.module = module
        self._build = build
        self._lock = threading.Lock()
        self._resolved: _Resolved | None = None

    @property
    def resolved(self) -> bool:
        return self._resolved is not None

    @property
    def options(self) -> ContextOptions | None:
        return self._resolved.options if self._resolved is not None else None

    def create(self) -> DbContext:
        with self._lock:
            resolved = self._resolved
            if resolved is None:
                engine, options = self._build(self.module)
                resolved = _Resolved(engine, create_sessionmaker(engine), options)
                self._resolved = resolved
        return self.context_type(resolved.engine, resolved.session_factory, resolved.options)

    async def dispose(self) -> None:
        with self._lock:
            resolved, self._resolved = self._resolved, None
        if resolved is not None:
            await resolved.engine.dispose()


class ContextBinder:
    def __init__(
        self,
        config: DbConfig | None = None,
        *,
        resolver: ProviderResolver | None = None,
    ) -> None:
        self._config: DbConfig | None = None
        self._resolver = resolver or ProviderResolver()
        self._registrations: dict[type[DbContext], ContextRegistration] = {}
        self._labels: dict[str, type[DbContext]] = {}
        self._log = get_logger(__name__)
        if config is not None:
            self.load_config(config)

    # --- configuration ------------------------------------------------------

    def load_config(self, config: DbConfig) -> None:
        if config is None:
            raise TypeError("config is required")
        if self._config is not None:
            raise ConfigurationError("database configuration is already loaded")
        if not config.use_in_memory_db and self._registrations:
            self._resolver.ensure_supported(config.provider)
        self._config = config
        if config.use_in_memory_db:
            self._log.info("using in-memory database")
        else:
            self._log.info("current db provider", provider=config.provider_key)

    @property
    def config_loaded(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> DbConfig:
        if self._config is None:
            raise ConfigurationError(
                "database configuration was not loaded before resolving a persistence context"
            )
        return self._config

    # --- registration -------------------------------------------------------

    def bind(self, context_type: type[TContext]) -> ContextRegistration:
        if not (isinstance(context_type, type) and issubclass(context_type, DbContext)):
            raise TypeError(f"expected a DbContext subclass, got {context_type!r}")

        existing = self._registrations.get(context_type)
        if existing is not None:
            self._log.debug("context already bound", module=existing.module)
            return existing

        module = context_type.module_label()
        owner = self._labels.get(module)
        if owner is not None:
            raise ConfigurationError(
                f"{context_type.__name__} and {owner.__name__} both derive module label "
                f"{module}; they would share one store and one version table"
            )
        if self._config is not None and not self._config.use_in_memory_db:
            # Fail at wiring time rather than on the first request.
            self._resolver.ensure_supported(self._config.provider)

        registration = ContextRegistration(context_type, module, self._build)
        self._registrations[context_type] = registration
        self._labels[module] = context_type
        return registration

    @property
    def bound_types(self) -> tuple[type[DbContext], ...]:
        return tuple(self._registrations)

    def registration(self, context_type: type[DbContext]) -> ContextRegistration:
        try:
            return self._registrations[context_type]
        except KeyError:
            raise ConfigurationError(f"{context_type.__name__} is not bound") from None

    # --- resolution ---------------------------------------------------------

    def create(self, context_type: type[TContext]) -> TContext:
        """New context instance; the caller owns it and must close it."""
        return self.registration(context_type).create()  # type: ignore[return-value]

    @asynccontextmanager
    async def scope(self, context_type: type[TContext]) -> AsyncIterator[TContext]:
        context = self.create(context_type)
        try:
            yield context
        finally:
            await context.close()

    async def dispose(self) -> None:
        for registration in self._registrations.values():
            await registration.dispose()

    def _build(self, module: str) -> tuple[AsyncEngine, ContextOptions]:
        # Runs at first resolution, never at bind time.
        config = self.config
        if config.use_in_memory_db:
            options = ContextOptions(module=module, in_memory=True, store_name=module)
            return create_in_memory_engine(module), options

        engine_configuration = self._resolver.resolve(
            config.provider_key, config.connection_string, module=module
        )
        options = ContextOptions(
            module=module, in_memory=False, engine_configuration=engine_configuration
        )
        return create_engine(engine_configuration), options


# --- Module Notes -----------------------------------------------------------
# One engine per module even when modules share a database: pools stay per module and
# each module's migrations run on their own connection.
