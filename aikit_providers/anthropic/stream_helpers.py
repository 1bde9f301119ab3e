"""Anthropic Messages stream decoder.

Event flow for one generation::

    message_start -> (content_block_start -> content_block_delta* ->
    content_block_stop)* -> message_delta -> message_stop

Tool-use blocks are keyed by the block ``index``: ``input_json_delta``
fragments accumulate under that index and ``content_block_stop`` finalizes
the call. The ``message_delta`` carrying ``stop_reason`` produces the single
terminal chunk; ``message_stop`` is never read after it.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..base.models import FinishReason, GenerationUsage, StreamChunk
from ..base.streaming.decoder import StreamDecoder, map_finish_reason

ANTHROPIC_FINISH_REASONS: Mapping[str, FinishReason] = {
    "end_turn": FinishReason.STOP,
    "max_tokens": FinishReason.LENGTH,
    "stop_sequence": FinishReason.STOP,
    "tool_use": FinishReason.TOOL_USE,
    "pause_turn": FinishReason.STOP,
    "refusal": FinishReason.ERROR,
}


def parse_anthropic_usage(usage: Optional[Mapping[str, Any]]) -> Optional[GenerationUsage]:
    if not usage:
        return None
    return GenerationUsage(
        input_tokens=usage.get("input_tokens"),
        output_tokens=usage.get("output_tokens"),
        cache_tokens=usage.get("cache_read_input_tokens"),
    )


class AnthropicStreamDecoder(StreamDecoder):
    """Decoder for ``/v1/messages`` streams."""

    provider_name = "anthropic"

    def feed(self, frame: Dict[str, Any]) -> Optional[StreamChunk]:
        kind = frame.get("type")
        if kind == "message_start":
            self.state.record_usage(parse_anthropic_usage((frame.get("message") or {}).get("usage")))
            return None
        if kind == "content_block_start":
            return self._on_block_start(frame.get("index", 0), frame.get("content_block") or {})
        if kind == "content_block_delta":
            return self._on_block_delta(frame.get("index", 0), frame.get("delta") or {})
        if kind == "content_block_stop":
            index = frame.get("index", 0)
            if index in self.state.pending_tool_calls:
                self.state.finalize_tool_call(index)
                return self.state.chunk()
            return None
        if kind == "message_delta":
            self.state.record_usage(parse_anthropic_usage(frame.get("usage")))
            stop_reason = (frame.get("delta") or {}).get("stop_reason")
            if stop_reason:
                return self.state.terminal_chunk(map_finish_reason(stop_reason, ANTHROPIC_FINISH_REASONS))
            return None
        if kind == "error":
            error = frame.get("error") or {}
            raise self.stream_error(
                str(error.get("message") or "stream error"),
                vendor_code=error.get("type"),
            )
        # message_stop, ping and unknown events carry nothing to report.
        return None

    def _on_block_start(self, index: int, block: Mapping[str, Any]) -> Optional[StreamChunk]:
        block_type = block.get("type")
        if block_type == "tool_use":
            self.state.start_tool_call(index, block.get("id") or f"toolu_{index}", block.get("name") or "")
            return None
        if block_type == "text":
            return self.state.extend(block.get("text") or "")
        if block_type == "thinking":
            return self.state.extend(reasoning=block.get("thinking") or "")
        return None

    def _on_block_delta(self, index: int, delta: Mapping[str, Any]) -> Optional[StreamChunk]:
        delta_type = delta.get("type")
        if delta_type == "text_delta":
            return self.state.extend(delta.get("text") or "")
        if delta_type == "input_json_delta":
            if not self.state.append_arguments(index, delta.get("partial_json") or "") and self._logger:
                self._logger.debug("input_json_delta for unknown content block %s", index)
            return None
        if delta_type == "thinking_delta":
            return self.state.extend(reasoning=delta.get("thinking") or "")
        return None


__all__ = ["ANTHROPIC_FINISH_REASONS", "AnthropicStreamDecoder", "parse_anthropic_usage"]
