"""
chatstream - Prometheus Metrics

Metrics collection for the dialect parsers with the Prometheus client library.

Metrics exposed:
- chatstream_events_total: Counter of parsed events by parser kind and dialect
- chatstream_parser_errors_total: Counter of fatal parser errors by code
- chatstream_terminating_issues_total: Counter of terminating issues by symbol
- chatstream_tool_calls_total: Counter of tool calls started
- chatstream_tokens_total: Counter of tokens reported (input/output)

Usage:
    from chatstream.observability.metrics import get_metrics, setup_metrics

    # Setup at startup
    setup_metrics()

    # Record metrics
    metrics = get_metrics()
    metrics.record_event(parser="chunk", dialect="openai")
    metrics.record_tokens(dialect="openai", input_tokens=100, output_tokens=50)
"""

import weakref
from typing import Optional

from prometheus_client import (
    Counter,
    Info,
    CollectorRegistry,
    REGISTRY,
)

from .. import __version__


class MetricsCollector:
    """
    Central metrics collector using Prometheus client.

    Singleton pattern for global access; tests pass a fresh registry.
    """

    _instance: Optional["MetricsCollector"] = None
    _initialized_registries: "weakref.WeakSet[CollectorRegistry]" = weakref.WeakSet()

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        """Initialize metrics collectors."""
        self.registry = registry

        # Metrics can only be registered once per registry; share the
        # singleton's only when it is bound to this same registry
        instance = MetricsCollector._instance
        if (
            registry in MetricsCollector._initialized_registries
            and instance is not None
            and instance.registry is registry
        ):
            self._copy_from(instance)
            return

        MetricsCollector._initialized_registries.add(registry)

        self.info = Info(
            "chatstream",
            "chatstream parser information",
            registry=registry,
        )
        self.info.info({
            "version": __version__,
        })

        self.events_total = Counter(
            "chatstream_events_total",
            "Total number of events handed to a parser",
            labelnames=["parser", "dialect"],
            registry=registry,
        )

        self.parser_errors = Counter(
            "chatstream_parser_errors_total",
            "Total fatal parser errors",
            labelnames=["parser", "dialect", "error_type", "code"],
            registry=registry,
        )

        # symbol = generic (upstream failure) / dialect_error (parse failure)
        self.terminating_issues = Counter(
            "chatstream_terminating_issues_total",
            "Total terminating issues surfaced to the sink",
            labelnames=["dialect", "symbol"],
            registry=registry,
        )

        self.tool_calls_total = Counter(
            "chatstream_tool_calls_total",
            "Total function tool calls started",
            labelnames=["parser", "dialect"],
            registry=registry,
        )

        self.tokens_total = Counter(
            "chatstream_tokens_total",
            "Total tokens reported by upstream usage blocks",
            labelnames=["dialect", "type"],  # type = input/output
            registry=registry,
        )

    @classmethod
    def get_instance(cls) -> "MetricsCollector":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _copy_from(self, other: "MetricsCollector"):
        """Copy metrics references from another collector."""
        self.info = other.info
        self.events_total = other.events_total
        self.parser_errors = other.parser_errors
        self.terminating_issues = other.terminating_issues
        self.tool_calls_total = other.tool_calls_total
        self.tokens_total = other.tokens_total

    def record_event(self, parser: str, dialect: str):
        """Record an event handed to a parser."""
        self.events_total.labels(parser=parser, dialect=dialect).inc()

    def record_parser_error(
        self,
        parser: str,
        dialect: str,
        error_type: str,
        code: str,
    ):
        """Record a fatal parser error."""
        self.parser_errors.labels(
            parser=parser,
            dialect=dialect,
            error_type=error_type,
            code=code,
        ).inc()

    def record_terminating_issue(self, dialect: str, symbol: str):
        """Record a terminating issue surfaced to the sink."""
        self.terminating_issues.labels(dialect=dialect, symbol=symbol).inc()

    def record_tool_call(self, parser: str, dialect: str):
        """Record a started function tool call."""
        self.tool_calls_total.labels(parser=parser, dialect=dialect).inc()

    def record_tokens(
        self,
        dialect: str,
        input_tokens: int,
        output_tokens: int,
    ):
        """Record token usage. Negative (unknown) counts are skipped."""
        if input_tokens > 0:
            self.tokens_total.labels(dialect=dialect, type="input").inc(input_tokens)
        if output_tokens > 0:
            self.tokens_total.labels(dialect=dialect, type="output").inc(output_tokens)


# Module-level functions for convenience
_metrics_instance: Optional[MetricsCollector] = None


def setup_metrics(registry: CollectorRegistry = REGISTRY) -> MetricsCollector:
    """
    Setup metrics collection.

    Call once at application startup.
    Safe to call multiple times - returns existing instance.
    """
    global _metrics_instance

    if _metrics_instance is not None and _metrics_instance.registry is registry:
        return _metrics_instance

    _metrics_instance = MetricsCollector(registry)
    MetricsCollector._instance = _metrics_instance
    return _metrics_instance


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance.

    Auto-initializes against the default registry.
    """
    global _metrics_instance
    if _metrics_instance is None:
        _metrics_instance = MetricsCollector.get_instance()
    return _metrics_instance
