"""
modular_api.migrations.env

Alembic migration environment shared by every module.

Responsibilities:
- Run a module's revisions on the connection handed over by `DbContext`.
- Record progress in the module's own version table.

Notes:
- This module is executed by Alembic (`command.upgrade`), not imported by the runtime.
- Per-module revisions live in `versions/<module>/`; `version_locations` selects one.
"""

from __future__ import annotations

from alembic import context

config = context.config

target_metadata = config.attributes.get("target_metadata")
version_table = config.get_main_option("version_table", "alembic_version")


def run_migrations_offline() -> None:
    # Offline: emit SQL scripts without a DB connection.
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        version_table=version_table,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is None:
        raise RuntimeError(
            "online migrations require a connection in config.attributes['connection']; "
            "run them through DbContext.apply_migrations()"
        )

    # The caller owns the transaction; begin_transaction() joins it.
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        version_table=version_table,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
