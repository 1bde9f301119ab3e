"""Fully resolved tool invocation emitted by a stream decoder."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model.

    ``arguments`` is always a parsed mapping. Decoders buffer the vendor's
    argument fragments and only build a ``ToolCall`` once they parse cleanly,
    so a partially streamed call is never observable.
    """

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


__all__ = ["ToolCall"]
