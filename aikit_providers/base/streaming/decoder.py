"""
Vendor-neutral stream decoder base class.

A decoder turns an ordered sequence of parsed vendor frames into normalized
:class:`StreamChunk` values. Concrete decoders implement :meth:`feed`, a
synchronous state transition that maps one frame to at most one chunk; the
async :meth:`decode` driver pulls frames only when the consumer asks for the
next chunk, so backpressure is implicit.

Termination rules enforced here:

- the first chunk carrying a ``finish_reason`` ends decoding; later frames
  (``message_stop``, keep-alives) are not read;
- when the frame stream ends without a terminal signal, :meth:`on_end_of_stream`
  decides; by default the generation is reported as truncated via
  :class:`ProviderStreamError` instead of inventing a finish reason.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import aclosing
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, Mapping, Optional

from ..errors import ProviderStreamError
from ..models import FinishReason, StreamChunk
from .sse import iter_json_frames
from .stream_state import StreamState


def map_finish_reason(
    native: Optional[str],
    table: Mapping[str, FinishReason],
    default: FinishReason = FinishReason.STOP,
) -> FinishReason:
    """Map a vendor-native stop code through a fixed table."""
    if native is None:
        return default
    return table.get(native, default)


class StreamDecoder(ABC):
    """Base class for per-vendor stream state machines.

    One instance decodes exactly one generation; instances are never shared
    across ``generate`` calls.
    """

    provider_name: str = "unknown"

    def __init__(self, *, model: Optional[str] = None, logger: Optional[logging.Logger] = None) -> None:
        self.model = model
        self.state = StreamState(provider=self.provider_name, model=model)
        self._logger = logger

    @abstractmethod
    def feed(self, frame: Dict[str, Any]) -> Optional[StreamChunk]:
        """Apply one parsed frame; return the chunk it produced, if any."""

    def on_end_of_stream(self) -> Optional[StreamChunk]:
        """Called when frames run out before any terminal chunk was emitted."""
        raise self.stream_error(
            "stream ended before the vendor signalled completion",
            vendor_code="incomplete_stream",
        )

    def finish(self) -> Optional[StreamChunk]:
        if self.state.terminated:
            return None
        return self.on_end_of_stream()

    def stream_error(self, message: str, *, vendor_code: Optional[str] = None) -> ProviderStreamError:
        return ProviderStreamError(
            message=message,
            provider=self.provider_name,
            model=self.model,
            vendor_code=vendor_code,
        )

    def feed_all(self, frames: Iterable[Dict[str, Any]]) -> list[StreamChunk]:
        """Synchronously decode a complete list of frames (tests, replays)."""
        chunks: list[StreamChunk] = []
        for frame in frames:
            chunk = self.feed(frame)
            if chunk is not None:
                chunks.append(chunk)
                if chunk.finish_reason is not None:
                    return chunks
        final = self.finish()
        if final is not None:
            chunks.append(final)
        return chunks

    async def decode(self, frames: AsyncIterable[Dict[str, Any]]) -> AsyncIterator[StreamChunk]:
        """Lazily decode ``frames`` into chunks, in arrival order."""
        async for frame in frames:
            chunk = self.feed(frame)
            if chunk is None:
                continue
            yield chunk
            if chunk.finish_reason is not None:
                return
        final = self.finish()
        if final is not None:
            yield final

    async def decode_lines(self, lines: AsyncIterable[str]) -> AsyncIterator[StreamChunk]:
        """Decode raw SSE body lines (``data: {...}``) into chunks."""
        async with aclosing(iter_json_frames(lines, self._logger)) as frames:
            async for chunk in self.decode(frames):
                yield chunk


__all__ = ["StreamDecoder", "map_finish_reason"]
