"""
chatstream - Part Transmitter

The sink both parsers write to. A parser never returns data; every
observable effect is a synchronous call on a PartTransmitter made while the
triggering event is being processed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import IssueSymbol, TerminatingIssue


# Argument streaming mode: arguments arrive as incremental string fragments
INCREMENTAL_STRING_ARGS = "incr_str"


@dataclass
class ChatCounters:
    """Usage counters reported for a completion."""
    chat_in: int
    chat_out: int
    chat_out_rate: Optional[float] = None
    chat_time_inner: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "chatIn": self.chat_in,
            "chatOut": self.chat_out,
        }
        if self.chat_out_rate is not None:
            result["chatOutRate"] = self.chat_out_rate
        if self.chat_time_inner is not None:
            result["chatTimeInner"] = self.chat_time_inner
        return result


class PartTransmitter(ABC):
    """
    Abstract sink for normalized message parts.

    Implementations drive UI/state updates. Each method is a synchronous,
    side-effecting call whose return value is ignored.
    """

    @abstractmethod
    def set_model_name(self, name: str) -> None:
        """Report the model that is generating the completion."""

    @abstractmethod
    def set_counters(self, counters: ChatCounters) -> None:
        """Report usage counters."""

    @abstractmethod
    def append_text(self, text: str) -> None:
        """Append a text fragment to the current message."""

    @abstractmethod
    def start_function_tool_call(
        self,
        id: str,
        name: str,
        mode: str,
        initial_args: str
    ) -> None:
        """
        Begin a function tool call part.

        Args:
            id: Tool call id (provider-supplied or generated)
            name: Function name
            mode: Argument streaming mode (INCREMENTAL_STRING_ARGS)
            initial_args: Argument text known at creation time
        """

    @abstractmethod
    def append_function_tool_call_args(self, id: str, args: str) -> None:
        """Append an argument fragment to the tool call with this id."""

    @abstractmethod
    def end_message_part(self) -> None:
        """Close the current message part."""

    @abstractmethod
    def set_dialect_terminating_issue(self, message: str, symbol: IssueSymbol) -> None:
        """End the stream with a readable, non-fatal issue."""


@dataclass
class TransmittedPart:
    """One recorded transmitter call."""
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RecordedToolCall:
    """Tool call as materialized by the RecordingTransmitter."""
    id: str
    name: str
    arguments: str = ""
    closed: bool = False


class RecordingTransmitter(PartTransmitter):
    """
    Transmitter that records every call and materializes the message.

    Usage:
        transmitter = RecordingTransmitter()
        parser = ChatCompletionsChunkParser()
        parser.parse(transmitter, '{"choices": [...]}')

        transmitter.text            # concatenated text
        transmitter.tool_calls      # {id: RecordedToolCall}
        transmitter.kinds()         # ["append_text", ...]
    """

    def __init__(self):
        self.parts: List[TransmittedPart] = []
        self.model_name: Optional[str] = None
        self.counters: List[ChatCounters] = []
        self.text: str = ""
        self.tool_calls: Dict[str, RecordedToolCall] = {}
        self.issue: Optional[TerminatingIssue] = None
        self._open_tool_call: Optional[str] = None

    def _record(self, kind: str, **payload):
        self.parts.append(TransmittedPart(kind=kind, payload=payload))

    def kinds(self) -> List[str]:
        """Get the sequence of recorded call kinds."""
        return [part.kind for part in self.parts]

    def set_model_name(self, name: str) -> None:
        self._record("set_model_name", name=name)
        self.model_name = name

    def set_counters(self, counters: ChatCounters) -> None:
        self._record("set_counters", counters=counters)
        self.counters.append(counters)

    def append_text(self, text: str) -> None:
        self._record("append_text", text=text)
        self.text += text

    def start_function_tool_call(
        self,
        id: str,
        name: str,
        mode: str,
        initial_args: str
    ) -> None:
        self._record(
            "start_function_tool_call",
            id=id, name=name, mode=mode, initial_args=initial_args
        )
        self.tool_calls[id] = RecordedToolCall(id=id, name=name, arguments=initial_args)
        self._open_tool_call = id

    def append_function_tool_call_args(self, id: str, args: str) -> None:
        self._record("append_function_tool_call_args", id=id, args=args)
        if id not in self.tool_calls:
            raise KeyError(f"append to unknown tool call: {id}")
        self.tool_calls[id].arguments += args

    def end_message_part(self) -> None:
        self._record("end_message_part")
        if self._open_tool_call is not None:
            self.tool_calls[self._open_tool_call].closed = True
            self._open_tool_call = None

    def set_dialect_terminating_issue(self, message: str, symbol: IssueSymbol) -> None:
        self._record("set_dialect_terminating_issue", message=message, symbol=symbol)
        self.issue = TerminatingIssue(message=message, symbol=symbol)
