"""
chatstream - Configuration

Environment-driven settings for the dialect parsers.
"""

import os
from enum import Enum


DEFAULT_TOOL_CALL_ID_PREFIX = "aix-tool-call-id"
DEFAULT_DONE_MARKER = "[DONE]"


class MetricsMode(str, Enum):
    """Whether parsers record Prometheus metrics."""

    ON = "on"
    OFF = "off"


def _is_truthy(value: str) -> bool:
    """Check if an environment value is truthy."""
    return value.lower() in ("1", "true", "yes", "on")


def _is_falsy(value: str) -> bool:
    """Check if an environment value is falsy."""
    return value.lower() in ("0", "false", "no", "off")


def get_tool_call_id_prefix() -> str:
    """
    Get the namespace prefix for generated tool call ids.

    Generated ids look like ``<prefix>_<hex>`` so they are visually
    distinguishable from provider-supplied ones.
    """
    prefix = os.getenv("CHATSTREAM_TOOL_CALL_ID_PREFIX", DEFAULT_TOOL_CALL_ID_PREFIX).strip()
    return prefix or DEFAULT_TOOL_CALL_ID_PREFIX


def get_done_marker() -> str:
    """Get the literal SSE payload that ends a stream."""
    marker = os.getenv("CHATSTREAM_DONE_MARKER", DEFAULT_DONE_MARKER).strip()
    return marker or DEFAULT_DONE_MARKER


def get_metrics_mode() -> MetricsMode:
    """
    Get the metrics mode.

    CHATSTREAM_METRICS must be a boolean-like value (on/off, true/false, 1/0).

    Default: on.
    """
    raw = os.getenv("CHATSTREAM_METRICS", "on").strip()
    if _is_truthy(raw):
        return MetricsMode.ON
    if _is_falsy(raw):
        return MetricsMode.OFF
    raise ValueError("Invalid CHATSTREAM_METRICS. Use one of: on, off, true, false, 1, 0")


def is_metrics_enabled() -> bool:
    """Check if parsers should record metrics."""
    return get_metrics_mode() == MetricsMode.ON
