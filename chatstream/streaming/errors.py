"""
chatstream - Terminating Issues

A terminating issue is how a stream ends when it cannot continue but should
not crash the pipeline: the message is shown to the end user as text.

Two categories are distinguished by symbol so the UI can render them
differently:
- GENERIC: upstream told us it failed (an ``error`` object inside an event)
- DIALECT_ERROR: we failed to understand upstream (a fatal parser error)
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class IssueSymbol(str, Enum):
    """Categorical symbol carried by a terminating issue."""
    GENERIC = "generic"
    DIALECT_ERROR = "dialect_error"


@dataclass
class TerminatingIssue:
    """A terminating, non-fatal dialect issue."""
    message: str
    symbol: IssueSymbol


def safe_error_string(error: Any) -> str:
    """
    Best-effort conversion of an upstream error payload to readable text.

    Upstream errors come as plain strings, ``{"message": ...}`` objects,
    ``{"error": {...}}`` envelopes, or arbitrary JSON.

    Returns:
        The message text, or "" when nothing usable is present
    """
    if error is None:
        return ""

    if isinstance(error, str):
        return error

    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message

        nested = error.get("error")
        if nested is not None:
            nested_text = safe_error_string(nested)
            if nested_text:
                return nested_text

        try:
            return json.dumps(error, default=str)
        except (TypeError, ValueError):
            return str(error)

    if isinstance(error, BaseException):
        return str(error) or type(error).__name__

    return str(error)


def is_present(value: Any) -> bool:
    """
    Check if an optional error/warning payload carries something.

    Falsy scalars (``false``, ``0``, ``""``, ``null``) are absent; any object
    or array is present, even an empty one.
    """
    if isinstance(value, (dict, list)):
        return True
    return bool(value)
