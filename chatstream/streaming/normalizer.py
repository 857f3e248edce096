"""
chatstream - Chat Completions Chunk Parser

Normalizes a streamed OpenAI-compatible chat completion into canonical
message-part calls on a PartTransmitter.

The protocol:
1. Each chunk carries a ``choices`` array with a single candidate
2. The candidate's ``delta`` holds what changed since the previous chunk
3. Text arrives as string fragments in ``delta.content``
4. Tool calls arrive in ``delta.tool_calls``: the first delta for an index
   has the id and name, later ones only argument fragments
5. A final chunk may carry ``usage`` with an empty ``choices`` array

There is no end-of-message field in this protocol; the transport ends the
session when it sees the ``[DONE]`` marker.

Dialect quirks absorbed here:
- Azure: bookkeeping chunks with empty id/object/model (prompt filter results)
- Groq: usage with timing under ``x_groq.usage``
- OpenRouter -> Gemini: choice index omitted
- Some providers: tool call index omitted (append as a new call)
"""

from dataclasses import dataclass, field
from typing import Optional

from ..config import is_metrics_enabled
from ..core.errors import (
    ChatStreamException,
    MissingDeltaError,
    UnexpectedChoiceCountError,
    UnexpectedChoiceIndexError,
    UnexpectedContentTypeError,
    UnexpectedToolCallTypeError,
)
from ..core.ids import IdFactory, tool_call_id
from ..observability.logging import LogContext, get_logger
from ..observability.metrics import MetricsCollector, get_metrics
from ..wire.models import ChatCompletionChunk, ChunkDelta, decode_event
from .errors import IssueSymbol, is_present, safe_error_string
from .tool_calls import FUNCTION_TOOL_TYPE, CompletionAccumulator
from .transmitter import INCREMENTAL_STRING_ARGS, ChatCounters, PartTransmitter

logger = get_logger(__name__)

PARSER_KIND = "chunk"


@dataclass
class ChunkParserSession:
    """
    State of one streamed completion.

    ``has_begun`` and ``has_warned`` are one-shot latches; nothing here is
    reset within a session.
    """
    has_begun: bool = False
    has_warned: bool = False
    terminated: bool = False
    events_parsed: int = 0
    accumulator: CompletionAccumulator = field(default_factory=CompletionAccumulator)


class ChatCompletionsChunkParser:
    """
    Stateful parser for one streamed chat completion.

    Usage:
        parser = ChatCompletionsChunkParser(dialect="openai")

        # For each SSE data payload, in arrival order:
        parser.parse(transmitter, event_data)

        # The transport stops calling once it sees [DONE] or parse() raises.
        parser.accumulator.content

    Not safe for concurrent use: events must be delivered strictly one at a
    time. A raised ChatStreamException ends the session.
    """

    def __init__(
        self,
        dialect: str = "openai",
        id_factory: Optional[IdFactory] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        self.dialect = dialect
        self.session = ChunkParserSession()
        self._id_factory = id_factory or tool_call_id
        if metrics is None and is_metrics_enabled():
            metrics = get_metrics()
        self._metrics = metrics

    @property
    def accumulator(self) -> CompletionAccumulator:
        return self.session.accumulator

    @property
    def terminated(self) -> bool:
        """True once an upstream error ended the session."""
        return self.session.terminated

    def __call__(self, transmitter: PartTransmitter, event_data: str) -> None:
        self.parse(transmitter, event_data)

    def parse(self, transmitter: PartTransmitter, event_data: str) -> None:
        """
        Process one raw event payload.

        Args:
            transmitter: Sink receiving normalized parts
            event_data: Raw payload, expected to be one JSON object

        Raises:
            MalformedEventError: payload is not JSON or fails the chunk schema
            ProtocolViolationError: payload breaks the single-candidate or
                write-once tool call contract
        """
        self.session.events_parsed += 1
        if self._metrics:
            self._metrics.record_event(parser=PARSER_KIND, dialect=self.dialect)

        try:
            chunk = decode_event(event_data, ChatCompletionChunk, dialect=self.dialect)
            self._process_chunk(transmitter, chunk)
        except ChatStreamException as e:
            if self._metrics:
                self._metrics.record_parser_error(
                    parser=PARSER_KIND,
                    dialect=self.dialect,
                    error_type=e.error.type.value,
                    code=e.code,
                )
            raise

    def _process_chunk(self, transmitter: PartTransmitter, chunk: ChatCompletionChunk):
        session = self.session

        # -> Model
        if not session.has_begun and chunk.model:
            session.has_begun = True
            LogContext.set_model(chunk.model)
            transmitter.set_model_name(chunk.model)

        # Upstream error: surfaced as readable text, not raised
        if is_present(chunk.error):
            message = safe_error_string(chunk.error) or "unknown."
            session.terminated = True
            logger.warning(
                "Upstream error in chunk",
                dialect=self.dialect,
                upstream_error=message,
            )
            if self._metrics:
                self._metrics.record_terminating_issue(
                    dialect=self.dialect, symbol=IssueSymbol.GENERIC.value
                )
            transmitter.set_dialect_terminating_issue(message, IssueSymbol.GENERIC)
            return

        # Warning: log once per session
        if is_present(chunk.warning) and not session.has_warned:
            session.has_warned = True
            logger.warning("Chunk warning", dialect=self.dialect, warning=chunk.warning)

        # [Azure] prompt_filter_results / prompt_annotations carry no content
        if chunk.id == "" and chunk.object == "" and chunk.model == "":
            return

        # -> Stats
        if chunk.usage is not None:
            if chunk.usage.completion_tokens is not None:
                prompt_tokens = chunk.usage.prompt_tokens
                self._set_counters(transmitter, ChatCounters(
                    chat_in=prompt_tokens if prompt_tokens is not None else -1,
                    chat_out=chunk.usage.completion_tokens,
                ))

            # Expected final stats-only chunk: usage with no choices
            if not chunk.choices:
                return

        # [Groq] -> Stats
        groq_usage = chunk.x_groq.usage if chunk.x_groq is not None else None
        if groq_usage is not None:
            out_tokens = groq_usage.completion_tokens
            out_time = groq_usage.completion_time
            self._set_counters(transmitter, ChatCounters(
                chat_in=groq_usage.prompt_tokens,
                chat_out=out_tokens,
                chat_out_rate=round(out_tokens / out_time, 2) if (out_tokens and out_time) else None,
                chat_time_inner=out_time,
            ))

        # n=1 -> single candidate only
        if len(chunk.choices) != 1:
            raise UnexpectedChoiceCountError(len(chunk.choices), dialect=self.dialect)

        choice = chunk.choices[0]

        # [OpenRouter -> Gemini] index may be omitted
        if choice.index is not None and choice.index != 0:
            raise UnexpectedChoiceIndexError(choice.index, dialect=self.dialect)

        if choice.delta is None:
            raise MissingDeltaError(choice.finish_reason, dialect=self.dialect)

        self._process_delta(transmitter, choice.delta)

        # Finish reason is diagnostic only; dialects disagree on its values
        if choice.finish_reason is not None:
            logger.debug(
                "Chunk finish reason",
                dialect=self.dialect,
                finish_reason=choice.finish_reason,
            )

    def _process_delta(self, transmitter: PartTransmitter, delta: ChunkDelta):
        accumulator = self.session.accumulator

        # delta: Text
        if isinstance(delta.content, str):
            accumulator.append_content(delta.content)
            transmitter.append_text(delta.content)
        elif delta.content is not None:
            raise UnexpectedContentTypeError(delta.content, where="delta", dialect=self.dialect)

        # delta: Tool Calls
        tool_call_deltas = delta.tool_calls or []
        for position, tc_delta in enumerate(tool_call_deltas):
            if tc_delta.type is not None and tc_delta.type != FUNCTION_TOOL_TYPE:
                raise UnexpectedToolCallTypeError(tc_delta.type, dialect=self.dialect)

            function = tc_delta.function
            index = tc_delta.index if tc_delta.index is not None else accumulator.next_index()
            existing = accumulator.get(index)

            # Creation
            if existing is None:
                created = accumulator.create(
                    index,
                    id=tc_delta.id or self._id_factory(),
                    name=function.name or "",
                    arguments=function.arguments or "",
                )
                if self._metrics:
                    self._metrics.record_tool_call(parser=PARSER_KIND, dialect=self.dialect)
                transmitter.start_function_tool_call(
                    created.id, created.name, INCREMENTAL_STRING_ARGS, created.arguments
                )

                # At most one new tool call per chunk
                dropped = len(tool_call_deltas) - position - 1
                if dropped:
                    logger.debug(
                        "Ignoring tool call deltas after a new tool call",
                        dialect=self.dialect,
                        tool_call_id=created.id,
                        dropped=dropped,
                    )
                break

            # Update: only arguments may grow after creation
            existing.check_update(tc_delta.id, function.name, dialect=self.dialect)
            if function.arguments:
                existing.append_arguments(function.arguments)
                transmitter.append_function_tool_call_args(existing.id, function.arguments)

    def _set_counters(self, transmitter: PartTransmitter, counters: ChatCounters):
        if self._metrics:
            self._metrics.record_tokens(
                dialect=self.dialect,
                input_tokens=counters.chat_in,
                output_tokens=counters.chat_out,
            )
        transmitter.set_counters(counters)


def create_chunk_parser(
    dialect: str = "openai",
    id_factory: Optional[IdFactory] = None
) -> ChatCompletionsChunkParser:
    """Factory function to create a fresh chunk parser (one per completion)."""
    return ChatCompletionsChunkParser(dialect=dialect, id_factory=id_factory)
