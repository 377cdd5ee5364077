"""
modular_api.persistence.__main__

Entrypoint for `python -m modular_api.persistence`: bring every module's schema
current without starting the API (e.g. as a deploy step).

Exits non-zero when configuration is invalid or any module fails to migrate.
"""

from __future__ import annotations

import asyncio
import sys

from modular_api.modules import bind_modules
from modular_api.observability.logging import configure_logging, get_logger
from modular_api.persistence.binder import ContextBinder
from modular_api.persistence.errors import PersistenceError
from modular_api.persistence.migrations import MigrationRunner, provision
from modular_api.settings import get_settings


async def _run(binder: ContextBinder) -> None:
    runner = MigrationRunner(binder)
    try:
        outcomes = await provision(binder, runner)
    finally:
        await binder.dispose()
    log = get_logger(__name__)
    for context_type, outcome in outcomes.items():
        log.info("module schema ready", module=context_type.module_label(), outcome=outcome.value)


def main() -> int:
    settings = get_settings()
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env == "prod",
    )
    log = get_logger(__name__)

    try:
        binder = bind_modules(ContextBinder(settings.db_config))
        asyncio.run(_run(binder))
    except PersistenceError as e:
        log.error("database provisioning failed", error=str(e), module=getattr(e, "module", None))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
