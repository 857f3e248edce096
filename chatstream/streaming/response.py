"""
chatstream - Chat Completions Response Parser

Normalizes a complete (non-streaming) chat completion into message-part
calls. There is no incremental phase: text is sent in one append, and each
tool call is started with its full arguments and closed immediately.
"""

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
from ..observability.logging import LogContext, get_logger
from ..observability.metrics import MetricsCollector, get_metrics
from ..wire.models import ChatCompletionResponse, ResponseMessage, decode_event
from .errors import is_present, safe_error_string
from .tool_calls import FUNCTION_TOOL_TYPE
from .transmitter import INCREMENTAL_STRING_ARGS, ChatCounters, PartTransmitter

logger = get_logger(__name__)

PARSER_KIND = "response"


class ChatCompletionsResponseParser:
    """
    Stateless parser for one complete chat completion response.

    Usage:
        parser = ChatCompletionsResponseParser(dialect="mistral")
        parser.parse(transmitter, response_body)
    """

    def __init__(
        self,
        dialect: str = "openai",
        metrics: Optional[MetricsCollector] = None
    ):
        self.dialect = dialect
        if metrics is None and is_metrics_enabled():
            metrics = get_metrics()
        self._metrics = metrics

    def __call__(self, transmitter: PartTransmitter, event_data: str) -> None:
        self.parse(transmitter, event_data)

    def parse(self, transmitter: PartTransmitter, event_data: str) -> None:
        """
        Process a full response payload.

        Raises:
            MalformedEventError: payload is not JSON or fails the response schema
            ProtocolViolationError: not exactly one candidate at index 0, or
                unexpected content / tool call types
        """
        if self._metrics:
            self._metrics.record_event(parser=PARSER_KIND, dialect=self.dialect)

        try:
            response = decode_event(event_data, ChatCompletionResponse, dialect=self.dialect)
            self._process_response(transmitter, response)
        except ChatStreamException as e:
            if self._metrics:
                self._metrics.record_parser_error(
                    parser=PARSER_KIND,
                    dialect=self.dialect,
                    error_type=e.error.type.value,
                    code=e.code,
                )
            raise

    def _process_response(self, transmitter: PartTransmitter, response: ChatCompletionResponse):
        # Error semantics of this dialect are uncertain: log, don't terminate
        if is_present(response.error):
            logger.warning(
                "Upstream error in response",
                dialect=self.dialect,
                upstream_error=safe_error_string(response.error),
            )
        if is_present(response.warning):
            logger.warning("Response warning", dialect=self.dialect, warning=response.warning)

        # -> Model
        if response.model:
            LogContext.set_model(response.model)
            transmitter.set_model_name(response.model)

        # -> Stats
        if response.usage is not None:
            counters = ChatCounters(
                chat_in=response.usage.prompt_tokens,
                chat_out=response.usage.completion_tokens,
            )
            if self._metrics:
                self._metrics.record_tokens(
                    dialect=self.dialect,
                    input_tokens=counters.chat_in,
                    output_tokens=counters.chat_out,
                )
            transmitter.set_counters(counters)

        if len(response.choices) != 1:
            raise UnexpectedChoiceCountError(len(response.choices), dialect=self.dialect)

        choice = response.choices[0]
        if choice.index != 0:
            raise UnexpectedChoiceIndexError(choice.index, dialect=self.dialect)

        if choice.message is None:
            raise MissingDeltaError(choice.finish_reason, dialect=self.dialect)

        self._process_message(transmitter, choice.message)

    def _process_message(self, transmitter: PartTransmitter, message: ResponseMessage):
        # message: Text
        if isinstance(message.content, str):
            if message.content:
                transmitter.append_text(message.content)
        elif message.content is not None:
            raise UnexpectedContentTypeError(message.content, where="message", dialect=self.dialect)

        # message: Tool Calls
        for tool_call in message.tool_calls or []:
            # [Mistral] type is omitted
            if tool_call.type is not None and tool_call.type != FUNCTION_TOOL_TYPE:
                raise UnexpectedToolCallTypeError(tool_call.type, dialect=self.dialect)

            if self._metrics:
                self._metrics.record_tool_call(parser=PARSER_KIND, dialect=self.dialect)
            transmitter.start_function_tool_call(
                tool_call.id,
                tool_call.function.name,
                INCREMENTAL_STRING_ARGS,
                tool_call.function.arguments,
            )
            transmitter.end_message_part()


def create_response_parser(dialect: str = "openai") -> ChatCompletionsResponseParser:
    """Factory function to create a response parser."""
    return ChatCompletionsResponseParser(dialect=dialect)
