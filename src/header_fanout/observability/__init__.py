"""Observability utilities for header fan-out.

This package provides:
- Prometheus metrics counting normalizer passes, values and collisions
- Structured logging with contextual information
"""

from header_fanout.observability.logging import (
    configure_from_config,
    configure_logging,
    get_logger,
)
from header_fanout.observability.metrics import record_pass

__all__ = [
    "configure_from_config",
    "configure_logging",
    "get_logger",
    "record_pass",
]
