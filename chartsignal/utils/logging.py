"""Structured logging setup with structlog and scan IDs.

Supports two output modes:
- "json": one JSON object per line
- "console": human-readable colored output

Every screener pass sets a scan ID in a context variable; it is added to
each log entry emitted while that pass runs, including entries from the
worker threads that evaluate individual charts.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token

import structlog

_scan_id: ContextVar[str] = ContextVar("scan_id", default="")


def set_scan_id(scan_id: str) -> Token[str]:
    """Set the scan ID for the current context."""
    return _scan_id.set(scan_id)


def reset_scan_id(token: Token[str]) -> None:
    """Restore the scan ID that was current before set_scan_id()."""
    _scan_id.reset(token)


def get_scan_id() -> str:
    """Get the scan ID for the current context."""
    return _scan_id.get()


def _add_scan_id(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    scan_id = get_scan_id()
    if scan_id:
        event_dict.setdefault("scan_id", scan_id)
    return event_dict


def setup_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Route structlog through the stdlib root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" or "console".
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_scan_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structlog logger."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
