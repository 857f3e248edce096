"""
chatstream - Wire Module

Typed, schema-validated views of the chat completions wire format.
"""

from .models import (
    WireModel,
    ChatCompletionChunk,
    ChunkChoice,
    ChunkDelta,
    ChunkToolCallDelta,
    ChunkFunctionDelta,
    ChunkUsage,
    GroqExtension,
    GroqUsage,
    ChatCompletionResponse,
    ResponseChoice,
    ResponseMessage,
    ResponseToolCall,
    ResponseFunction,
    ResponseUsage,
    decode_event,
)

__all__ = [
    "WireModel",
    # Streaming
    "ChatCompletionChunk",
    "ChunkChoice",
    "ChunkDelta",
    "ChunkToolCallDelta",
    "ChunkFunctionDelta",
    "ChunkUsage",
    "GroqExtension",
    "GroqUsage",
    # Non-streaming
    "ChatCompletionResponse",
    "ResponseChoice",
    "ResponseMessage",
    "ResponseToolCall",
    "ResponseFunction",
    "ResponseUsage",
    # Decoding
    "decode_event",
]
