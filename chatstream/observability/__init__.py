"""
chatstream - Observability Module

- Prometheus metrics (Counter)
- Structured JSON logging with per-stream context injection

Usage:
    from chatstream.observability import get_logger, get_metrics

    logger = get_logger(__name__)
    metrics = get_metrics()
"""

from .metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from .logging import (
    StructuredLogger,
    JSONFormatter,
    get_logger,
    setup_logging,
    LogContext,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "get_metrics",
    "setup_metrics",
    # Logging
    "StructuredLogger",
    "JSONFormatter",
    "get_logger",
    "setup_logging",
    "LogContext",
]
