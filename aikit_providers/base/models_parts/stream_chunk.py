"""
Normalized streaming chunk.

Every vendor decoder emits :class:`StreamChunk` values with an identical
shape. Invariants upheld by the decoders:

- ``content`` is the concatenation of every ``delta`` yielded so far in the
  generation; it never shrinks or gets replaced.
- ``finish_reason`` is set on at most one chunk, and that chunk is the last.
- ``tool_calls`` lists only calls fully resolved at that point; arguments
  are parsed mappings, never fragments.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .finish_reason import FinishReason
from .tool_call import ToolCall
from .usage import GenerationUsage


@dataclass(frozen=True)
class ReasoningDelta:
    """Cumulative and incremental reasoning ("thinking") text."""

    content: str
    delta: str


@dataclass(frozen=True)
class StreamChunk:
    """One increment of a streamed generation."""

    content: str
    delta: str
    finish_reason: Optional[FinishReason] = None
    tool_calls: Optional[List[ToolCall]] = None
    reasoning: Optional[ReasoningDelta] = None
    usage: Optional[GenerationUsage] = None

    @property
    def is_terminal(self) -> bool:
        return self.finish_reason is not None


__all__ = ["StreamChunk", "ReasoningDelta"]
