"""
Structured logging for the query and session layers.

Log output is off the hot path: the iterator itself never logs per row,
only query execution, cursor failures and session lifecycle do.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from lazyhydration.config import get_settings


def _processors(json_logs: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Route structlog through the standard logging module.

    Arguments left as None are taken from settings
    (LAZYHYDRATION_LOG_LEVEL, LAZYHYDRATION_JSON_LOGS).

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: JSON lines when True, coloured console output otherwise
    """
    settings = get_settings()
    level_name = (log_level or settings.LOG_LEVEL).upper()
    use_json = settings.JSON_LOGS if json_logs is None else json_logs

    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {level_name!r}")

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("lazyhydration").setLevel(level)

    structlog.configure(
        processors=_processors(use_json),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a module, e.g. ``get_logger(__name__)``."""
    return structlog.get_logger(name)
