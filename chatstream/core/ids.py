"""
chatstream - Identifier Generation

Collision-resistant ids for tool calls whose id the provider omitted.
"""

import uuid
from typing import Callable, Optional

from ..config import get_tool_call_id_prefix


IdFactory = Callable[[], str]


def tool_call_id(prefix: Optional[str] = None) -> str:
    """
    Generate a namespaced tool call id.

    Args:
        prefix: Namespace prefix (defaults to CHATSTREAM_TOOL_CALL_ID_PREFIX)

    Returns:
        An id like ``aix-tool-call-id_3f2a...``
    """
    return f"{prefix or get_tool_call_id_prefix()}_{uuid.uuid4().hex}"
