"""OpenAI Chat Completions stream decoder.

Frame shape (one per ``data:`` line)::

    {"choices": [{"index": 0,
                  "delta": {"content": "...", "tool_calls": [...]},
                  "finish_reason": null}],
     "usage": null}

State transitions:
- ``delta.content`` and ``delta.reasoning`` / ``delta.reasoning_content``
  extend the text and reasoning accumulators.
- ``delta.tool_calls[i]`` starts a call for a new ``index`` once an id or a
  name is present; later entries for the same index append argument
  fragments.
- ``finish_reason`` finalizes every pending call (the chunk for that frame
  carries them) and records the mapped finish reason. The terminal chunk is
  emitted at ``[DONE]`` / end of body so a trailing usage-only frame, sent
  when ``stream_options.include_usage`` is on, lands on it.
- A top-level ``error`` object raises :class:`ProviderStreamError`.
- Only choice ``index`` 0 is decoded; frames for other choices (``n`` > 1)
  are skipped.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..base.models import FinishReason, GenerationUsage, StreamChunk
from ..base.streaming.decoder import StreamDecoder, map_finish_reason

CHAT_FINISH_REASONS: Mapping[str, FinishReason] = {
    "stop": FinishReason.STOP,
    "length": FinishReason.LENGTH,
    "tool_calls": FinishReason.TOOL_USE,
    "content_filter": FinishReason.STOP,
    "function_call": FinishReason.TOOL_USE,
}


def parse_chat_usage(usage: Optional[Mapping[str, Any]]) -> Optional[GenerationUsage]:
    """Map the Chat Completions ``usage`` object to :class:`GenerationUsage`."""
    if not usage:
        return None
    completion_details = usage.get("completion_tokens_details") or {}
    prompt_details = usage.get("prompt_tokens_details") or {}
    return GenerationUsage(
        input_tokens=usage.get("prompt_tokens"),
        output_tokens=usage.get("completion_tokens"),
        total_tokens=usage.get("total_tokens"),
        reasoning_tokens=completion_details.get("reasoning_tokens"),
        cache_tokens=prompt_details.get("cached_tokens"),
    )


class OpenAIChatStreamDecoder(StreamDecoder):
    """Decoder for ``/chat/completions`` streams."""

    provider_name = "openai"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._finish: Optional[FinishReason] = None

    def feed(self, frame: Dict[str, Any]) -> Optional[StreamChunk]:
        error = frame.get("error")
        if error:
            self._raise_error(error)
        self.state.record_usage(parse_chat_usage(frame.get("usage")))
        choice = next(
            (c for c in frame.get("choices") or () if c and c.get("index", 0) == 0),
            None,
        )
        if choice is None:
            return None
        delta = choice.get("delta") or {}
        for tool_delta in delta.get("tool_calls") or ():
            self._apply_tool_delta(tool_delta)
        native_finish = choice.get("finish_reason")
        if native_finish and self._finish is None:
            self._finish = map_finish_reason(native_finish, CHAT_FINISH_REASONS)
            self.state.finalize_all()
        reasoning = delta.get("reasoning") or delta.get("reasoning_content") or ""
        return self.state.extend(delta.get("content") or "", reasoning)

    def _apply_tool_delta(self, tool_delta: Mapping[str, Any]) -> None:
        index = tool_delta.get("index", 0)
        function = tool_delta.get("function") or {}
        call_id = tool_delta.get("id")
        name = function.get("name")
        if index not in self.state.pending_tool_calls and (call_id or name):
            self.state.start_tool_call(index, call_id or f"call_{index}", name or "")
        elif call_id or name:
            self.state.start_tool_call(index, call_id or "", name or "")
        fragment = function.get("arguments") or ""
        if not self.state.append_arguments(index, fragment) and fragment and self._logger:
            self._logger.debug("dropping arguments for unknown tool call index %s", index)

    def _raise_error(self, error: Any) -> None:
        if isinstance(error, Mapping):
            message = str(error.get("message") or "stream error")
            vendor_code = error.get("code") or error.get("type")
        else:
            message, vendor_code = str(error), None
        raise self.stream_error(message, vendor_code=str(vendor_code) if vendor_code else None)

    def on_end_of_stream(self) -> Optional[StreamChunk]:
        if self._finish is None:
            return super().on_end_of_stream()
        return self.state.terminal_chunk(self._finish)


__all__ = ["CHAT_FINISH_REASONS", "OpenAIChatStreamDecoder", "parse_chat_usage"]
