"""
chatstream - Streaming Module

Normalization of OpenAI-compatible chat completions:
- Streamed chunk parsing with cross-chunk accumulation
- Single-shot response parsing
- Terminating issues for upstream-reported failures
- A small dispatch helper for SSE payloads
"""

from .normalizer import (
    ChatCompletionsChunkParser,
    ChunkParserSession,
    create_chunk_parser,
)
from .response import (
    ChatCompletionsResponseParser,
    create_response_parser,
)
from .tool_calls import (
    CompletionAccumulator,
    ToolCallState,
)
from .transmitter import (
    INCREMENTAL_STRING_ARGS,
    ChatCounters,
    PartTransmitter,
    RecordingTransmitter,
    RecordedToolCall,
    TransmittedPart,
)
from .errors import (
    IssueSymbol,
    TerminatingIssue,
    safe_error_string,
)
from .dispatch import (
    StreamOutcome,
    dispatch_stream,
    dispatch_response,
    iter_sse_data,
)

__all__ = [
    # Parsers
    "ChatCompletionsChunkParser",
    "ChunkParserSession",
    "create_chunk_parser",
    "ChatCompletionsResponseParser",
    "create_response_parser",
    # Accumulation
    "CompletionAccumulator",
    "ToolCallState",
    # Transmitter
    "INCREMENTAL_STRING_ARGS",
    "ChatCounters",
    "PartTransmitter",
    "RecordingTransmitter",
    "RecordedToolCall",
    "TransmittedPart",
    # Errors
    "IssueSymbol",
    "TerminatingIssue",
    "safe_error_string",
    # Dispatch
    "StreamOutcome",
    "dispatch_stream",
    "dispatch_response",
    "iter_sse_data",
]
