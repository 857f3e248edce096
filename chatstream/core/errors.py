"""
chatstream - Error Definitions

Error taxonomy for the dialect parsers.

Two fatal classes are raised from inside a parser:
- MALFORMED: the payload could not be decoded or does not match the wire schema
- PROTOCOL: the payload is well-formed but breaks the single-candidate,
  write-once contract the parsers rely on

Upstream-reported failures (an ``error`` object inside a well-formed event)
are NOT exceptions; the streaming parser turns them into a terminating issue.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """Error classification."""
    MALFORMED = "malformed_input"
    PROTOCOL = "protocol_violation"


@dataclass
class ErrorDetails:
    """Full error information for a fatal parser error."""
    # Core fields (always present)
    code: str
    message: str
    type: ErrorType

    # Context fields
    dialect: Optional[str] = None

    # Debug fields
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code,
            "message": self.message,
            "type": self.type.value,
        }

        if self.dialect:
            result["dialect"] = self.dialect
        if self.details:
            result["details"] = self.details

        return {"error": result}


class ChatStreamException(Exception):
    """Base exception for all chatstream errors."""

    def __init__(self, error: ErrorDetails):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> str:
        return self.error.code

    def to_dict(self) -> Dict[str, Any]:
        return self.error.to_dict()


# ============================================================
# Malformed Input
# ============================================================

class MalformedEventError(ChatStreamException):
    """Event payload is not valid JSON or does not match the wire schema."""

    def __init__(
        self,
        message: str,
        code: str = "schema_mismatch",
        dialect: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            ErrorDetails(
                code=code,
                message=message,
                type=ErrorType.MALFORMED,
                dialect=dialect or None,
                details=details or {}
            )
        )


class InvalidJSONError(MalformedEventError):
    """Event payload failed to decode as JSON."""

    def __init__(self, reason: str, dialect: str = ""):
        super().__init__(
            message=f"malformed event data: {reason}",
            code="invalid_json",
            dialect=dialect
        )


class SchemaMismatchError(MalformedEventError):
    """Event payload decoded but failed schema validation."""

    def __init__(self, schema: str, errors: list, dialect: str = ""):
        super().__init__(
            message=f"event does not match {schema} schema ({len(errors)} error(s))",
            code="schema_mismatch",
            dialect=dialect,
            details={"schema": schema, "errors": errors}
        )


# ============================================================
# Protocol Contract Violations
# ============================================================

class ProtocolViolationError(ChatStreamException):
    """Event is well-formed but breaks the parser's protocol contract."""

    def __init__(
        self,
        message: str,
        code: str = "protocol_violation",
        dialect: str = "",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            ErrorDetails(
                code=code,
                message=message,
                type=ErrorType.PROTOCOL,
                dialect=dialect or None,
                details=details or {}
            )
        )


class UnexpectedChoiceCountError(ProtocolViolationError):
    """Event carries zero or several completion candidates."""

    def __init__(self, count: int, dialect: str = ""):
        super().__init__(
            message=f"expected 1 completion, got {count}",
            code="unexpected_choice_count",
            dialect=dialect,
            details={"count": count}
        )


class UnexpectedChoiceIndexError(ProtocolViolationError):
    """The single candidate is not at index 0."""

    def __init__(self, index: Any, dialect: str = ""):
        super().__init__(
            message=f"expected completion index 0, got {index}",
            code="unexpected_choice_index",
            dialect=dialect,
            details={"index": index}
        )


class MissingDeltaError(ProtocolViolationError):
    """The candidate carries no delta (streaming) or message (single-shot)."""

    def __init__(self, finish_reason: Optional[str], dialect: str = ""):
        super().__init__(
            message=f"server response missing content (finish_reason: {finish_reason})",
            code="missing_delta",
            dialect=dialect,
            details={"finish_reason": finish_reason}
        )


class UnexpectedContentTypeError(ProtocolViolationError):
    """Content is neither a string nor null."""

    def __init__(self, value: Any, where: str = "delta", dialect: str = ""):
        type_name = type(value).__name__
        super().__init__(
            message=f"unexpected {where} content type: {type_name}",
            code="unexpected_content_type",
            dialect=dialect,
            details={"content_type": type_name}
        )


class UnexpectedToolCallTypeError(ProtocolViolationError):
    """Tool call declares a kind other than function."""

    def __init__(self, tool_call_type: Any, dialect: str = ""):
        super().__init__(
            message=f"unexpected tool_call type: {tool_call_type}",
            code="unexpected_tool_call_type",
            dialect=dialect,
            details={"tool_call_type": tool_call_type}
        )


class ToolCallIdChangedError(ProtocolViolationError):
    """A later delta tried to replace a tool call's id."""

    def __init__(self, existing_id: str, new_id: str, dialect: str = ""):
        super().__init__(
            message=f"unexpected tool_call id change: {new_id}",
            code="tool_call_id_changed",
            dialect=dialect,
            details={"existing_id": existing_id, "new_id": new_id}
        )


class ToolCallNameChangedError(ProtocolViolationError):
    """A later delta tried to set a tool call's name."""

    def __init__(self, tool_call_id: str, new_name: str, dialect: str = ""):
        super().__init__(
            message=f"unexpected tool_call name change: {new_name}",
            code="tool_call_name_changed",
            dialect=dialect,
            details={"tool_call_id": tool_call_id, "new_name": new_name}
        )
