"""
chatstream - Pytest Configuration

Configures:
- Recording transmitter fixture
- Metrics collector bound to a fresh registry
- Deterministic tool call id factory
- Sample wire payloads
"""

import pytest

from prometheus_client import CollectorRegistry

from chatstream.observability.metrics import MetricsCollector
from chatstream.streaming.transmitter import RecordingTransmitter


# ============================================================
# Transmitter / Metrics
# ============================================================

@pytest.fixture
def transmitter():
    """A sink that records every call."""
    return RecordingTransmitter()


@pytest.fixture
def fresh_registry():
    """Create a fresh registry for each test."""
    return CollectorRegistry()


@pytest.fixture
def metrics(fresh_registry):
    """Create a metrics collector with a fresh registry."""
    return MetricsCollector(registry=fresh_registry)


@pytest.fixture
def id_factory():
    """Deterministic tool call id factory: gen_1, gen_2, ..."""
    counter = {"n": 0}

    def _next_id() -> str:
        counter["n"] += 1
        return f"gen_{counter['n']}"

    return _next_id


# ============================================================
# Sample Payloads
# ============================================================

@pytest.fixture
def openai_response():
    """Standard OpenAI chat response."""
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "created": 1234567890,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": "Hello! I'm a mock response."
                },
                "finish_reason": "stop"
            }
        ],
        "usage": {
            "prompt_tokens": 10,
            "completion_tokens": 8,
            "total_tokens": 18
        }
    }
