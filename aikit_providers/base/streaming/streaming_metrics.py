"""Streaming metrics for a single ``generate`` invocation.

Collected by the provider facade and emitted once on the ``stream.end`` /
``stream.error`` log events.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..models import GenerationUsage, StreamChunk


@dataclass
class StreamMetrics:
    """Counters and timings for one stream."""

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    finish_reason: Optional[str] = None
    tool_calls: int = 0
    usage: Optional[GenerationUsage] = None
    started_at: float = field(default_factory=time.perf_counter)

    def observe(self, chunk: StreamChunk) -> None:
        self.emitted += 1
        if chunk.delta and self.time_to_first_token_ms is None:
            self.time_to_first_token_ms = (time.perf_counter() - self.started_at) * 1000.0
        if chunk.tool_calls:
            self.tool_calls += len(chunk.tool_calls)
        if chunk.usage is not None:
            self.usage = chunk.usage
        if chunk.finish_reason is not None:
            self.finish_reason = chunk.finish_reason.value

    def close(self) -> None:
        self.total_duration_ms = (time.perf_counter() - self.started_at) * 1000.0

    def tokens(self) -> Optional[Dict[str, Any]]:
        return self.usage.to_dict() if self.usage is not None else None


__all__ = ["StreamMetrics"]
