"""
modular_api.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs (prod) or console logs (local dev).
- Keep Alembic's stdlib chatter at a level matching the service.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Stdlib loggers that emit one line per revision step during `command.upgrade`.
_MIGRATION_LOGGERS = ("alembic", "alembic.runtime.migration")


def configure_logging(*, service_name: str, level: str, json_logs: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging, once per process.

    `json_logs=False` switches to the human-readable console renderer for local runs.
    """

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    # Alembic logs every revision at INFO; only surface it when we are debugging.
    for name in _MIGRATION_LOGGERS:
        logging.getLogger(name).setLevel(log_level if log_level <= logging.DEBUG else logging.WARNING)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    # Each call returns a fresh lazy proxy, so per-instance loggers pick up the
    # processors configured at the time they first log.
    return structlog.get_logger(name, **initial_values)


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via contextvars in `observability.middleware`.
