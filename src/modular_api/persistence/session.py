"""
modular_api.persistence.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine for a resolved provider configuration.
- Create the named in-memory engine used when `use_in_memory_db` is set.
- Create the async sessionmaker with safe defaults.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from modular_api.persistence.providers import EngineConfiguration


def in_memory_url(store_name: str) -> str:
    # Named shared-cache memory database: one store per name per process.
    return f"sqlite+aiosqlite:///file:{store_name}?mode=memory&cache=shared&uri=true"


def create_engine(configuration: EngineConfiguration) -> AsyncEngine:
    # Creating the engine does not connect; the pool opens connections on first use.
    return create_async_engine(configuration.url, **configuration.engine_options)


def create_in_memory_engine(store_name: str) -> AsyncEngine:
    # StaticPool keeps a single connection alive, which keeps the memory store alive
    # until the engine is disposed.
    return create_async_engine(
        in_memory_url(store_name),
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False avoids surprising lazy loads after commits.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


# --- Module Notes -----------------------------------------------------------
# Engines are owned by `ContextBinder` registrations and disposed at shutdown.
