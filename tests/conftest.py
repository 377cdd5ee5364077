"""
tests.conftest

Shared fixtures for persistence and API tests.

Responsibilities:
- Provide SQLite-file and in-memory `DbConfig` instances.
- Provide a recording `ProviderResolver` and scriptable fake module contexts.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from sqlalchemy import MetaData

from modular_api.persistence.context import DbContext
from modular_api.persistence.providers import EngineConfiguration, ProviderResolver
from modular_api.settings import DbConfig


@pytest.fixture
def sqlite_config(tmp_path: Path) -> DbConfig:
    return DbConfig(provider="sqlite", connection_string=f"sqlite:///{tmp_path / 'app.db'}")


@pytest.fixture
def in_memory_config() -> DbConfig:
    return DbConfig(use_in_memory_db=True)


class RecordingResolver(ProviderResolver):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str, str]] = []

    def resolve(self, provider_id: str, connection_string: str, *, module: str) -> EngineConfiguration:
        self.calls.append((provider_id, connection_string, module))
        return super().resolve(provider_id, connection_string, module=module)


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver()


@dataclass
class EngineScript:
    """What a fake module's engine reports, plus what was asked of it."""

    pending: list[str] = field(default_factory=list)
    fail_with: Exception | None = None
    fail_on_create: Exception | None = None
    on_apply: Callable[[], Awaitable[None]] | None = None
    pending_checks: int = 0
    applied: int = 0
    created: int = 0
    closed: int = 0


def fake_context_type(name: str, script: EngineScript) -> type[DbContext]:
    """A `DbContext` subclass named `name` whose migration calls hit `script`, not a database."""

    class _FakeContext(DbContext):
        metadata = MetaData()

        def __init__(self, *args, **kwargs) -> None:
            if script.fail_on_create is not None:
                raise script.fail_on_create
            super().__init__(*args, **kwargs)
            script.created += 1

        async def has_pending_migrations(self) -> bool:
            script.pending_checks += 1
            return bool(script.pending)

        async def apply_migrations(self) -> None:
            script.applied += 1
            if script.on_apply is not None:
                await script.on_apply()
            if script.fail_with is not None:
                raise script.fail_with
            script.pending.clear()

        async def close(self) -> None:
            script.closed += 1
            await super().close()

    _FakeContext.__name__ = name
    _FakeContext.__qualname__ = name
    return _FakeContext


# --- Module Notes -----------------------------------------------------------
# Fake contexts still go through `ContextBinder`, so engines are built (never
# connected) from whatever config the test loads.
