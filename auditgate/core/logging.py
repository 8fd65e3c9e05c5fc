"""Structured logging for the CLI: structlog events rendered through stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Any

import structlog

LOG_FORMATS = ("console", "json")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    raise ValueError(f"unknown log format {log_format!r} (expected one of: {', '.join(LOG_FORMATS)})")


def _logging_config(log_level: str, renderer: structlog.types.Processor) -> dict[str, Any]:
    """dictConfig for a single stderr handler.

    stdout is reserved for the report and ``--json`` output.
    """
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"unknown log level {log_level!r}")
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": _SHARED_PROCESSORS,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "structlog",
            },
        },
        # Third-party noise stays at WARNING; only auditgate follows log_level.
        "root": {"handlers": ["stderr"], "level": "WARNING"},
        "loggers": {"auditgate": {"level": log_level}},
    }


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and stdlib logging for one CLI run.

    Explicit arguments (from ``--verbose`` / ``--log-format``) win over
    ``AUDITGATE_LOG_LEVEL`` (default INFO) and ``AUDITGATE_LOG_FORMAT``
    (console | json, default console). Raises ``ValueError`` on an unknown
    level or format.
    """
    log_level = (level or os.environ.get("AUDITGATE_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.environ.get("AUDITGATE_LOG_FORMAT", "console")).lower()

    logging.config.dictConfig(_logging_config(log_level, _renderer(log_format)))
    structlog.configure(
        processors=_SHARED_PROCESSORS + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
