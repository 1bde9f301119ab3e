"""OpenAI Responses API stream decoder.

Every frame is a typed event (``{"type": "response.output_text.delta", ...}``).
Function calls are built from three events:

1. ``response.output_item.added`` with a ``function_call`` item registers the
   call under its ``call_id`` and remembers which ``output_index`` and
   ``item_id`` refer to it;
2. ``response.function_call_arguments.delta`` appends fragments, resolving the
   call by ``call_id``, ``item_id`` or ``output_index``;
3. ``response.function_call_arguments.done`` finalizes it; its full
   ``arguments`` string wins over the buffered fragments.

``response.completed`` / ``response.incomplete`` end the generation.
``error`` and ``response.failed`` raise :class:`ProviderStreamError`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..base.models import FinishReason, GenerationUsage, StreamChunk
from ..base.streaming.decoder import StreamDecoder, map_finish_reason

RESPONSES_FINISH_REASONS: Mapping[str, FinishReason] = {
    "completed": FinishReason.STOP,
    "incomplete": FinishReason.LENGTH,
    "failed": FinishReason.ERROR,
    "tool_calls_required": FinishReason.TOOL_USE,
}

_TEXT_EVENTS = frozenset({"response.output_text.delta"})
_REASONING_EVENTS = frozenset({"response.reasoning_summary_text.delta", "response.reasoning_text.delta"})
_TERMINAL_EVENTS = {
    "response.completed": "completed",
    "response.incomplete": "incomplete",
}


def parse_responses_usage(usage: Optional[Mapping[str, Any]]) -> Optional[GenerationUsage]:
    if not usage:
        return None
    output_details = usage.get("output_tokens_details") or {}
    input_details = usage.get("input_tokens_details") or {}
    return GenerationUsage(
        input_tokens=usage.get("input_tokens"),
        output_tokens=usage.get("output_tokens"),
        total_tokens=usage.get("total_tokens"),
        reasoning_tokens=output_details.get("reasoning_tokens"),
        cache_tokens=input_details.get("cached_tokens"),
    )


class OpenAIResponsesStreamDecoder(StreamDecoder):
    """Decoder for ``/responses`` streams."""

    provider_name = "openai-responses"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._index_to_call: Dict[int, str] = {}
        self._item_to_call: Dict[str, str] = {}

    def feed(self, frame: Dict[str, Any]) -> Optional[StreamChunk]:
        kind = frame.get("type")
        if kind in _TEXT_EVENTS:
            return self.state.extend(frame.get("delta") or "")
        if kind in _REASONING_EVENTS:
            return self.state.extend(reasoning=frame.get("delta") or "")
        if kind == "response.output_item.added":
            self._on_item_added(frame)
            return None
        if kind == "response.function_call_arguments.delta":
            call_id = self._resolve_call(frame)
            if call_id is not None:
                self.state.append_arguments(call_id, frame.get("delta") or "")
            return None
        if kind == "response.function_call_arguments.done":
            return self._finalize(self._resolve_call(frame), frame.get("arguments"))
        if kind == "response.output_item.done":
            item = frame.get("item") or {}
            if item.get("type") == "function_call" and item.get("call_id") in self.state.pending_tool_calls:
                return self._finalize(item["call_id"], item.get("arguments"))
            return None
        if kind in _TERMINAL_EVENTS:
            response = frame.get("response") or {}
            self.state.record_usage(parse_responses_usage(response.get("usage")))
            status = response.get("status") or _TERMINAL_EVENTS[kind]
            return self.state.terminal_chunk(map_finish_reason(status, RESPONSES_FINISH_REASONS))
        if kind == "error":
            raise self.stream_error(
                str(frame.get("message") or "stream error"),
                vendor_code=frame.get("code"),
            )
        if kind == "response.failed":
            error = (frame.get("response") or {}).get("error") or {}
            raise self.stream_error(
                str(error.get("message") or "response failed"),
                vendor_code=error.get("code") or "failed",
            )
        return None

    def _on_item_added(self, frame: Mapping[str, Any]) -> None:
        item = frame.get("item") or {}
        if item.get("type") != "function_call":
            return
        call_id = item.get("call_id") or item.get("id")
        if not call_id:
            return
        self.state.start_tool_call(call_id, call_id, item.get("name") or "")
        if frame.get("output_index") is not None:
            self._index_to_call[frame["output_index"]] = call_id
        if item.get("id"):
            self._item_to_call[item["id"]] = call_id

    def _resolve_call(self, frame: Mapping[str, Any]) -> Optional[str]:
        call_id = frame.get("call_id")
        if call_id in self.state.pending_tool_calls:
            return call_id
        item_call = self._item_to_call.get(frame.get("item_id") or "")
        if item_call is not None:
            return item_call
        return self._index_to_call.get(frame.get("output_index"))

    def _finalize(self, call_id: Optional[str], arguments: Optional[str]) -> Optional[StreamChunk]:
        if call_id is None or self.state.finalize_tool_call(call_id, arguments or None) is None:
            return None
        return self.state.chunk()


__all__ = ["OpenAIResponsesStreamDecoder", "RESPONSES_FINISH_REASONS", "parse_responses_usage"]
