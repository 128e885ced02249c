"""
Logging setup for the User Directory API.

structlog owns the output format.  Records from the standard library
(``logging.getLogger(__name__)`` in the services and repositories,
uvicorn, SQLAlchemy) are routed through the same processors, so every
line on stdout has one shape: ``event``, ``level``, ``logger``,
``timestamp``, ``service``, ``version`` plus whatever the caller bound,
e.g. the ``request_id`` set by the request logging middleware.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

SERVICE_NAME: str = "user-directory-api"

# The request logging middleware already emits one event per request.
_DUPLICATE_ACCESS_LOGGERS: tuple[str, ...] = ("uvicorn.access",)


def service_metadata(service: str, version: str | None = None) -> structlog.types.Processor:
    """Build a processor stamping *service* (and *version*, if given) on each event."""

    def _stamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service)
        if version is not None:
            event_dict.setdefault("version", version)
        return event_dict

    return _stamp


def setup_logging(
    log_level: str = "INFO",
    *,
    json_output: bool = True,
    service: str = SERVICE_NAME,
    version: str | None = None,
) -> None:
    """Install the structlog pipeline and point the root logger at stdout.

    Safe to call more than once; each call replaces the root handlers.
    ``json_output=False`` switches to structlog's coloured console
    renderer for local runs.  An unknown *log_level* falls back to INFO.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        service_metadata(service, version),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final: structlog.types.Processor
    if json_output:
        final = structlog.processors.JSONRenderer()
    else:
        final = structlog.dev.ConsoleRenderer()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, final],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _DUPLICATE_ACCESS_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger for presentation-layer code (middleware, handlers)."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
