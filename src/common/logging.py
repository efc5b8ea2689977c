"""Structured logging for normalization runs using structlog.

Batch runs emit one JSON object per event; local runs get the console
renderer. Enum members bound to events (drop reasons, disciplines, start
types) are written as their plain values in both modes.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any

import structlog

from src.common.config import get_settings

# Third-party loggers kept at WARNING whatever the run level
_QUIET_LOGGERS = ("polars",)


def _enum_values(
    _logger: Any, _method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace enum members in the event with their values."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in event_dict.items()
    }


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Args:
        level: Log level name; overrides ``settings.logging.level``.
        fmt: ``"json"`` or ``"text"``; overrides ``settings.logging.format``.
    """
    settings = get_settings()
    level_name = (level or settings.logging.level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _enum_values,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(fmt or settings.logging.format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
