"""
chatstream Core Module

Error taxonomy and identifier generation shared by both parsers.
"""

from .errors import (
    ErrorType,
    ErrorDetails,
    ChatStreamException,
    MalformedEventError,
    InvalidJSONError,
    SchemaMismatchError,
    ProtocolViolationError,
    UnexpectedChoiceCountError,
    UnexpectedChoiceIndexError,
    MissingDeltaError,
    UnexpectedContentTypeError,
    UnexpectedToolCallTypeError,
    ToolCallIdChangedError,
    ToolCallNameChangedError,
)
from .ids import IdFactory, tool_call_id

__all__ = [
    # Errors
    "ErrorType",
    "ErrorDetails",
    "ChatStreamException",
    "MalformedEventError",
    "InvalidJSONError",
    "SchemaMismatchError",
    "ProtocolViolationError",
    "UnexpectedChoiceCountError",
    "UnexpectedChoiceIndexError",
    "MissingDeltaError",
    "UnexpectedContentTypeError",
    "UnexpectedToolCallTypeError",
    "ToolCallIdChangedError",
    "ToolCallNameChangedError",
    # Ids
    "IdFactory",
    "tool_call_id",
]
