"""Structured logging configuration using structlog.

JSON lines in production, coloured console output otherwise. Uvicorn's own
loggers go through the same formatter so server lifecycle messages share the
format of the access log.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_LEVEL_ALIASES = {
    "debug": "DEBUG",
    "info": "INFO",
    "": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
}


def normalize_level(level: str) -> str:
    """Map user input onto a stdlib level name, defaulting to INFO."""
    return _LEVEL_ALIASES.get(level.strip().lower(), "INFO")


def setup_logging(
    *,
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "simple-api",
    version: str = "0.1.0",
) -> None:
    """Configure structlog and stdlib logging for the process.

    Args:
        log_level: debug, info, warn/warning or error; anything else is INFO.
        json_logs: If True, emit JSON; otherwise coloured console output.
        service_name: Added to every log line.
        version: Added to every log line next to the service name.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_identity(service_name, version),
    ]

    if json_logs:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(normalize_level(log_level))

    # uvicorn installs its own handlers; hand its records to the root handler
    for name in ("uvicorn", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    logging.getLogger("uvicorn.access").disabled = True


def _add_service_identity(service_name: str, version: str) -> structlog.types.Processor:
    """Return a processor that stamps service name and version."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("version", version)
        return event_dict

    return processor
