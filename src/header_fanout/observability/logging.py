"""Structured logging configuration for header fan-out.

Logs are emitted through structlog so that fan-out events carry their
numbers (value counts, capacity, collisions) as fields rather than text.

Examples:
    Configure logging::

        from header_fanout.observability.logging import configure_logging

        configure_logging(level="INFO", json_output=True)

    Configure from a FanoutConfig::

        configure_from_config(FanoutConfig.from_env())

    Output (JSON)::

        {
            "event": "headers.fanout.capacity_exceeded",
            "header": "set-cookie",
            "value_count": 600,
            "capacity": 512,
            "timestamp": "2024-01-01T00:00:00.000000Z",
            "level": "warning"
        }
"""

import logging
import sys
from typing import Any

import structlog

from header_fanout.config import FanoutConfig


def _build_processors(json_output: bool) -> list[Any]:
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        renderer,
    ]


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Route fan-out events through structlog at ``level``.

    Call once at startup, before the first response is normalized; loggers
    are cached on first use.
    """
    numeric_level = logging.getLevelNamesMapping()[level.upper()]

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    structlog.configure(
        processors=_build_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_config(config: FanoutConfig) -> None:
    """Configure logging using the log settings of a FanoutConfig."""
    configure_logging(level=config.log_level, json_output=config.json_logs)


def get_logger(name: str) -> Any:
    """Return a structlog logger named ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
