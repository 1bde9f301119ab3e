"""Consumer-side helpers for ``generate`` streams.

These helpers consume an async iterator of :class:`StreamChunk` and fold it
into a :class:`StreamResult`, optionally invoking per-field callbacks along
the way. They never swallow stream errors: a failing stream propagates out of
the helper after the callbacks for every chunk already received have run.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, AsyncIterator, Callable, List, Optional, TypeVar

from ..models import FinishReason, GenerationUsage, ReasoningDelta, StreamChunk, ToolCall

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class StreamResult:
    """Folded outcome of a complete stream."""

    content: str = ""
    finish_reason: Optional[FinishReason] = None
    tool_calls: Optional[List[ToolCall]] = None
    reasoning: Optional[str] = None
    usage: Optional[GenerationUsage] = None


def _fold_tool_calls(current: Optional[List[ToolCall]], chunk: StreamChunk) -> Optional[List[ToolCall]]:
    if not chunk.tool_calls:
        return current
    return [*(current or []), *chunk.tool_calls]


async def collect_stream(stream: AsyncIterable[StreamChunk]) -> StreamResult:
    """Consume ``stream`` keeping the latest cumulative content.

    Tool calls are reported once each across chunks, so they are accumulated
    rather than replaced.
    """
    result = StreamResult()
    async for chunk in stream:
        result.content = chunk.content
        if chunk.reasoning is not None:
            result.reasoning = chunk.reasoning.content
        result.tool_calls = _fold_tool_calls(result.tool_calls, chunk)
        if chunk.finish_reason is not None:
            result.finish_reason = chunk.finish_reason
        if chunk.usage is not None:
            result.usage = chunk.usage
    return result


async def collect_deltas(stream: AsyncIterable[StreamChunk]) -> StreamResult:
    """Consume ``stream`` rebuilding content from the deltas alone."""
    content: List[str] = []
    reasoning: List[str] = []
    result = StreamResult()
    async for chunk in stream:
        content.append(chunk.delta)
        if chunk.reasoning is not None:
            reasoning.append(chunk.reasoning.delta)
        result.tool_calls = _fold_tool_calls(result.tool_calls, chunk)
        if chunk.finish_reason is not None:
            result.finish_reason = chunk.finish_reason
        if chunk.usage is not None:
            result.usage = chunk.usage
    result.content = "".join(content)
    result.reasoning = "".join(reasoning) or None
    return result


async def process_stream(
    stream: AsyncIterable[StreamChunk],
    *,
    on_chunk: Optional[Callable[[StreamChunk], None]] = None,
    on_delta: Optional[Callable[[str], None]] = None,
    on_content: Optional[Callable[[str], None]] = None,
    on_tool_calls: Optional[Callable[[List[ToolCall]], None]] = None,
    on_finish: Optional[Callable[[FinishReason], None]] = None,
    on_reasoning: Optional[Callable[[ReasoningDelta], None]] = None,
    on_usage: Optional[Callable[[GenerationUsage], None]] = None,
) -> StreamResult:
    """Consume ``stream`` dispatching each chunk to the provided handlers.

    Handler order per chunk: ``on_chunk``, ``on_delta``, ``on_content``,
    ``on_reasoning``, ``on_tool_calls``, ``on_finish``, ``on_usage``.
    ``on_delta`` only fires for non-empty deltas.
    """
    result = StreamResult()
    async for chunk in stream:
        if on_chunk:
            on_chunk(chunk)
        if on_delta and chunk.delta:
            on_delta(chunk.delta)
        if on_content:
            on_content(chunk.content)
        if chunk.reasoning is not None:
            result.reasoning = chunk.reasoning.content
            if on_reasoning:
                on_reasoning(chunk.reasoning)
        if chunk.tool_calls:
            result.tool_calls = _fold_tool_calls(result.tool_calls, chunk)
            if on_tool_calls:
                on_tool_calls(chunk.tool_calls)
        if chunk.finish_reason is not None:
            result.finish_reason = chunk.finish_reason
            if on_finish:
                on_finish(chunk.finish_reason)
        if chunk.usage is not None:
            result.usage = chunk.usage
            if on_usage:
                on_usage(chunk.usage)
        result.content = chunk.content
    return result


async def filter_stream(stream: AsyncIterable[T], predicate: Callable[[T], bool]) -> AsyncIterator[T]:
    async for item in stream:
        if predicate(item):
            yield item


async def map_stream(stream: AsyncIterable[T], mapper: Callable[[T], U]) -> AsyncIterator[U]:
    async for item in stream:
        yield mapper(item)


__all__ = [
    "StreamResult",
    "collect_stream",
    "collect_deltas",
    "process_stream",
    "filter_stream",
    "map_stream",
]
