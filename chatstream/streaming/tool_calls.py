"""
chatstream - Completion Accumulator

In-memory reconstruction of the assistant message being streamed.

Tool calls are streamed incrementally:
1. The first delta for an index carries the id and function name, and
   usually empty arguments
2. Later deltas for that index only carry argument fragments

The id and name are write-once; arguments only ever grow.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.errors import ToolCallIdChangedError, ToolCallNameChangedError


FUNCTION_TOOL_TYPE = "function"


@dataclass
class ToolCallState:
    """
    Accumulated state of one streamed tool call.

    ``id`` and ``name`` are fixed at creation; ``arguments`` starts at the
    creation-time seed and grows by append only.
    """
    index: int
    id: str
    name: str = ""
    arguments: str = ""
    type: str = FUNCTION_TOOL_TYPE

    def check_update(
        self,
        id: Optional[str],
        name: Optional[str],
        dialect: str = ""
    ):
        """
        Validate that a later delta does not rewrite id or name.

        Runs before this call is mutated, so a rejected delta leaves its
        arguments untouched. Effects of the same event that came earlier
        (its text, updates to other tool calls) are already transmitted and
        are not rolled back.

        Raises:
            ToolCallIdChangedError: delta carries a different non-empty id
            ToolCallNameChangedError: delta carries any non-empty name
        """
        if id and id != self.id:
            raise ToolCallIdChangedError(self.id, id, dialect=dialect)
        if name:
            raise ToolCallNameChangedError(self.id, name, dialect=dialect)

    def append_arguments(self, fragment: str):
        """Append an argument fragment."""
        self.arguments += fragment

    def to_dict(self) -> Dict[str, Any]:
        """Convert to OpenAI tool call format."""
        return {
            "id": self.id,
            "type": self.type,
            "function": {
                "name": self.name,
                "arguments": self.arguments
            }
        }


class CompletionAccumulator:
    """
    Running reconstruction of one streamed completion.

    Tool calls are kept in an explicit index -> state mapping; an index, once
    assigned, always resolves to the same call.
    """

    def __init__(self):
        self.content: Optional[str] = None
        self._tool_calls: Dict[int, ToolCallState] = {}

    def append_content(self, text: str):
        """Append a text delta. ``content`` stays None until the first one."""
        self.content = (self.content or "") + text

    def next_index(self) -> int:
        """
        Get the slot used by tool call deltas that carry no index.

        This is one past the highest index seen, so it never resolves to an
        existing call even if the provider skipped indices.
        """
        if not self._tool_calls:
            return 0
        return max(self._tool_calls) + 1

    def get(self, index: int) -> Optional[ToolCallState]:
        """Get the tool call at an index, if created."""
        return self._tool_calls.get(index)

    def create(
        self,
        index: int,
        id: str,
        name: str = "",
        arguments: str = ""
    ) -> ToolCallState:
        """Create the tool call for a previously unseen index."""
        if index in self._tool_calls:
            raise ValueError(f"tool call index {index} already exists")
        state = ToolCallState(index=index, id=id, name=name, arguments=arguments)
        self._tool_calls[index] = state
        return state

    def ordered(self) -> List[ToolCallState]:
        """Get all tool calls in index order."""
        return [self._tool_calls[i] for i in sorted(self._tool_calls)]

    def to_list(self) -> List[Dict[str, Any]]:
        """Convert all tool calls to a list of OpenAI-format dicts."""
        return [call.to_dict() for call in self.ordered()]

    def has_tool_calls(self) -> bool:
        """Check if any tool calls were created."""
        return len(self._tool_calls) > 0

    def __len__(self) -> int:
        return len(self._tool_calls)
