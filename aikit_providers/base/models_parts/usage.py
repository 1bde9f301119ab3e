"""Token usage reported by vendors during or at the end of a stream."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GenerationUsage:
    """Token accounting for one generation.

    Every field is optional because vendors report different subsets, and some
    report them piecemeal across several frames (see :meth:`merge`).
    """

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    cache_tokens: Optional[int] = None

    def merge(self, other: Optional["GenerationUsage"]) -> "GenerationUsage":
        """Return a copy with non-``None`` fields of ``other`` layered on top."""
        if other is None:
            return self
        updates = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name) is not None}
        return replace(self, **updates)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Return the populated fields only (used for structured logging)."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


__all__ = ["GenerationUsage"]
