"""
modular_api.persistence.migrations

Startup-time schema migration per bound module.

Responsibilities:
- Bring each bound module's schema current, independently of other modules.
- Track each module's state for the lifetime of the process.
- Turn engine failures into `MigrationError`, which must abort startup.

State per module:
    UNBOUND -> BOUND -> IN_MEMORY_READY
                     -> SCHEMA_CURRENT
                     -> SCHEMA_MIGRATED
                     -> MIGRATION_FAILED (terminal)

Limitations:
- There is no cross-process migration lock; two processes migrating the same module
  at once rely entirely on the database's own locking.
"""

from __future__ import annotations

import asyncio
import enum

from modular_api.observability.logging import get_logger
from modular_api.persistence.binder import ContextBinder
from modular_api.persistence.context import DbContext
from modular_api.persistence.errors import ConfigurationError, MigrationError


class ModuleState(enum.StrEnum):
    unbound = "UNBOUND"
    bound = "BOUND"
    in_memory_ready = "IN_MEMORY_READY"
    schema_current = "SCHEMA_CURRENT"
    schema_migrated = "SCHEMA_MIGRATED"
    migration_failed = "MIGRATION_FAILED"


class MigrationOutcome(enum.StrEnum):
    in_memory = "IN_MEMORY"
    current = "CURRENT"
    migrated = "MIGRATED"


_SETTLED: dict[ModuleState, MigrationOutcome] = {
    ModuleState.in_memory_ready: MigrationOutcome.in_memory,
    ModuleState.schema_current: MigrationOutcome.current,
    ModuleState.schema_migrated: MigrationOutcome.migrated,
}


class MigrationRunner:
    def __init__(self, binder: ContextBinder) -> None:
        if binder is None:
            raise TypeError("binder is required")
        self._binder = binder
        self._states: dict[type[DbContext], ModuleState] = {}
        self._locks: dict[type[DbContext], asyncio.Lock] = {}
        self._upgrade_lock = asyncio.Lock()
        self._log = get_logger(__name__)

    def state_of(self, context_type: type[DbContext]) -> ModuleState:
        if context_type in self._states:
            return self._states[context_type]
        if context_type in self._binder.bound_types:
            return ModuleState.bound
        return ModuleState.unbound

    async def ensure_migrated(self, context_type: type[DbContext]) -> MigrationOutcome:
        """
        Apply pending migrations for one bound module; safe to call repeatedly.

        Once a module is settled in this process, later calls return the recorded
        outcome without touching the database.
        """

        module = self._binder.registration(context_type).module
        lock = self._locks.setdefault(context_type, asyncio.Lock())
        async with lock:
            state = self._states.get(context_type)
            if state is ModuleState.migration_failed:
                raise MigrationError(
                    f"database migrations for {module} module failed earlier in this process",
                    module=module,
                )
            if state in _SETTLED:
                self._log.debug("migrations already ensured", module=module, state=state.value)
                return _SETTLED[state]

            outcome = await self._migrate(context_type, module)
            self._states[context_type] = {
                MigrationOutcome.in_memory: ModuleState.in_memory_ready,
                MigrationOutcome.current: ModuleState.schema_current,
                MigrationOutcome.migrated: ModuleState.schema_migrated,
            }[outcome]
            return outcome

    async def ensure_all_migrated(
        self, *context_types: type[DbContext]
    ) -> dict[type[DbContext], MigrationOutcome]:
        # Modules are independent: each run acquires its own scoped context; only the
        # Alembic upgrade step itself is serialised across modules.
        targets = context_types or self._binder.bound_types
        results = await asyncio.gather(
            *(self.ensure_migrated(t) for t in targets), return_exceptions=True
        )
        # Let every module finish before surfacing the first failure.
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return dict(zip(targets, results))

    async def _migrate(self, context_type: type[DbContext], module: str) -> MigrationOutcome:
        # In-memory stores have no persisted schema to evolve.
        if self._binder.config.use_in_memory_db:
            return MigrationOutcome.in_memory

        try:
            # The engine is built on first scope, so driver/engine errors land here too.
            async with self._binder.scope(context_type) as context:
                if not await context.has_pending_migrations():
                    self._log.debug("no pending database migrations", module=module)
                    return MigrationOutcome.current
                # alembic.op and alembic.context are process-global: one upgrade at a time.
                async with self._upgrade_lock:
                    await context.apply_migrations()
        except ConfigurationError:
            raise
        except Exception as e:
            self._states[context_type] = ModuleState.migration_failed
            raise MigrationError(
                f"failed to apply database migrations for {module} module: {e}",
                module=module,
            ) from e

        self._log.info("applied database migrations", module=module)
        return MigrationOutcome.migrated


async def provision(
    binder: ContextBinder, runner: MigrationRunner
) -> dict[type[DbContext], MigrationOutcome]:
    """
    Startup entry point: migrate every bound module, or create the schema of each
    in-memory store when running without a real provider.
    """

    outcomes = await runner.ensure_all_migrated()
    if binder.config.use_in_memory_db:
        for context_type in binder.bound_types:
            async with binder.scope(context_type) as context:
                await context.ensure_created()
    return outcomes


# --- Module Notes -----------------------------------------------------------
# Migration application is not cancellable once started; callers wanting a timeout
# should wrap `provision`/`ensure_all_migrated` as a whole.
