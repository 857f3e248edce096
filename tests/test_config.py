"""
chatstream - Configuration Tests
"""

import pytest

from chatstream.config import (
    DEFAULT_DONE_MARKER,
    DEFAULT_TOOL_CALL_ID_PREFIX,
    MetricsMode,
    get_done_marker,
    get_metrics_mode,
    get_tool_call_id_prefix,
    is_metrics_enabled,
)
from chatstream.core.ids import tool_call_id
from chatstream.streaming.normalizer import ChatCompletionsChunkParser
from tests.payloads import tool_call_event


class TestToolCallIdPrefix:

    def test_default(self, monkeypatch):
        monkeypatch.delenv("CHATSTREAM_TOOL_CALL_ID_PREFIX", raising=False)

        assert get_tool_call_id_prefix() == DEFAULT_TOOL_CALL_ID_PREFIX

    def test_override(self, monkeypatch):
        monkeypatch.setenv("CHATSTREAM_TOOL_CALL_ID_PREFIX", "gw-call")

        assert get_tool_call_id_prefix() == "gw-call"
        assert tool_call_id().startswith("gw-call_")

    def test_blank_falls_back(self, monkeypatch):
        monkeypatch.setenv("CHATSTREAM_TOOL_CALL_ID_PREFIX", "  ")

        assert get_tool_call_id_prefix() == DEFAULT_TOOL_CALL_ID_PREFIX

    def test_generated_ids_are_unique(self):
        ids = {tool_call_id(prefix="p") for _ in range(100)}

        assert len(ids) == 100
        assert all(i.startswith("p_") for i in ids)

    def test_parser_uses_prefix(self, monkeypatch, transmitter):
        monkeypatch.setenv("CHATSTREAM_TOOL_CALL_ID_PREFIX", "gw-call")
        parser = ChatCompletionsChunkParser()

        parser.parse(transmitter, tool_call_event({"index": 0, "function": {"name": "f"}}))

        assert parser.accumulator.get(0).id.startswith("gw-call_")


class TestDoneMarker:

    def test_default(self, monkeypatch):
        monkeypatch.delenv("CHATSTREAM_DONE_MARKER", raising=False)

        assert get_done_marker() == DEFAULT_DONE_MARKER == "[DONE]"

    def test_override(self, monkeypatch):
        monkeypatch.setenv("CHATSTREAM_DONE_MARKER", "[END]")

        assert get_done_marker() == "[END]"


class TestMetricsMode:

    def test_default_on(self, monkeypatch):
        monkeypatch.delenv("CHATSTREAM_METRICS", raising=False)

        assert get_metrics_mode() == MetricsMode.ON
        assert is_metrics_enabled() is True

    @pytest.mark.parametrize("value", ["off", "false", "0", "NO"])
    def test_off(self, monkeypatch, value):
        monkeypatch.setenv("CHATSTREAM_METRICS", value)

        assert get_metrics_mode() == MetricsMode.OFF
        assert is_metrics_enabled() is False

    def test_invalid(self, monkeypatch):
        monkeypatch.setenv("CHATSTREAM_METRICS", "sometimes")

        with pytest.raises(ValueError):
            get_metrics_mode()

    def test_parser_without_metrics(self, monkeypatch, transmitter):
        monkeypatch.setenv("CHATSTREAM_METRICS", "off")
        parser = ChatCompletionsChunkParser()

        parser.parse(transmitter, tool_call_event({"index": 0, "id": "a", "function": {}}))

        assert parser._metrics is None
        assert transmitter.kinds() == ["start_function_tool_call"]
