"""
chatstream - Chat Completions Wire Models

Pydantic models for the OpenAI-compatible chat completions wire format,
in both the streaming (chunk) and non-streaming (full response) dialects.

Providers omit fields freely, so almost everything is optional: an absent
field decodes to ``None`` and callers test presence with ``is not None``.
Unknown fields (``system_fingerprint``, ``prompt_filter_results``, ...) are
ignored.
"""

from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.errors import InvalidJSONError, SchemaMismatchError


class WireModel(BaseModel):
    """
    Base for wire models: tolerate unknown fields, but never coerce types.

    ``"index": "0"`` or ``"completion_tokens": 2.0`` is a schema mismatch.
    """

    model_config = ConfigDict(extra="ignore", strict=True)


# ============================================================
# Streaming Chunk
# ============================================================

class ChunkFunctionDelta(WireModel):
    """Function fragment inside a streamed tool call."""
    name: Optional[str] = None
    arguments: Optional[str] = None


class ChunkToolCallDelta(WireModel):
    """Tool call fragment inside a streamed delta."""
    index: Optional[int] = None
    id: Optional[str] = None
    type: Optional[str] = None
    function: ChunkFunctionDelta


class ChunkDelta(WireModel):
    """What changed since the previous chunk."""
    role: Optional[str] = None
    # Typed loosely on purpose: the parser reports non-string content itself
    content: Any = None
    tool_calls: Optional[List[ChunkToolCallDelta]] = None


class ChunkChoice(WireModel):
    """A single streamed candidate."""
    index: Optional[int] = None
    delta: Optional[ChunkDelta] = None
    finish_reason: Optional[str] = None


class ChunkUsage(WireModel):
    """Usage block, usually on the final stats-only chunk."""
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None


class GroqUsage(WireModel):
    """Groq's usage accounting, with timing."""
    prompt_tokens: int
    completion_tokens: int
    completion_time: Optional[float] = None


class GroqExtension(WireModel):
    """The ``x_groq`` envelope; only ``usage`` is consumed."""
    id: Optional[str] = None
    usage: Optional[GroqUsage] = None


class ChatCompletionChunk(WireModel):
    """
    One streamed chat completion event.

    ``choices`` defaults to empty so that error-only and Azure bookkeeping
    events still decode; the parser enforces the cardinality.
    """
    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    model: Optional[str] = None

    error: Any = None
    warning: Any = None

    usage: Optional[ChunkUsage] = None
    x_groq: Optional[GroqExtension] = None

    choices: List[ChunkChoice] = Field(default_factory=list)


# ============================================================
# Full (Non-Streaming) Response
# ============================================================

class ResponseFunction(WireModel):
    """Complete function invocation."""
    name: str
    arguments: str


class ResponseToolCall(WireModel):
    """Complete tool call. Mistral omits ``type``."""
    id: str
    type: Optional[str] = None
    function: ResponseFunction


class ResponseMessage(WireModel):
    """The assistant message of a full response."""
    role: Optional[str] = None
    content: Any = None
    tool_calls: Optional[List[ResponseToolCall]] = None


class ResponseChoice(WireModel):
    """A single complete candidate."""
    index: int
    message: Optional[ResponseMessage] = None
    finish_reason: Optional[str] = None


class ResponseUsage(WireModel):
    """Usage block of a full response."""
    prompt_tokens: int
    completion_tokens: int


class ChatCompletionResponse(WireModel):
    """A complete, non-streamed chat completion."""
    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    model: Optional[str] = None

    error: Any = None
    warning: Any = None

    usage: Optional[ResponseUsage] = None

    choices: List[ResponseChoice] = Field(default_factory=list)


# ============================================================
# Decoding
# ============================================================

WireModelT = TypeVar("WireModelT", bound=WireModel)


def decode_event(
    event_data: str,
    schema: Type[WireModelT],
    dialect: str = ""
) -> WireModelT:
    """
    Decode a raw event payload into a typed wire model.

    Args:
        event_data: Raw payload, expected to be one JSON object
        schema: Wire model class to validate against
        dialect: Dialect name, attached to errors for diagnostics

    Returns:
        Validated model instance

    Raises:
        InvalidJSONError: Payload is not valid JSON
        SchemaMismatchError: Payload does not match the schema
    """
    if not isinstance(event_data, (str, bytes)):
        raise InvalidJSONError(f"expected text, got {type(event_data).__name__}", dialect=dialect)

    try:
        return schema.model_validate_json(event_data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        if errors and errors[0]["type"] == "json_invalid":
            raise InvalidJSONError(errors[0]["msg"], dialect=dialect) from e
        raise SchemaMismatchError(schema.__name__, errors, dialect=dialect) from e
