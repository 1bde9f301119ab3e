"""Gemini ``streamGenerateContent`` decoder.

Each frame is a partial ``GenerateContentResponse``::

    {"candidates": [{"content": {"role": "model", "parts": [...]},
                     "finishReason": "STOP"}],
     "usageMetadata": {...}}

Function calls arrive whole (``functionCall {name, args, id?}``), so they are
recorded as soon as they are seen. Calls without a vendor id use the function
name; a repeated id gets a ``_<n>`` suffix so ids stay unique within the
generation. Parts flagged ``thought`` are reasoning text.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.models import FinishReason, GenerationUsage, StreamChunk
from ..base.streaming.decoder import StreamDecoder, map_finish_reason

GEMINI_FINISH_REASONS: Mapping[str, FinishReason] = {
    "STOP": FinishReason.STOP,
    "MAX_TOKENS": FinishReason.LENGTH,
    "TOOL_CODE_EXECUTED": FinishReason.TOOL_USE,
    "SAFETY": FinishReason.STOP,
    "RECITATION": FinishReason.STOP,
    "OTHER": FinishReason.STOP,
    "MALFORMED_FUNCTION_CALL": FinishReason.ERROR,
}


def parse_gemini_usage(usage: Optional[Mapping[str, Any]]) -> Optional[GenerationUsage]:
    if not usage:
        return None
    return GenerationUsage(
        input_tokens=usage.get("promptTokenCount"),
        output_tokens=usage.get("candidatesTokenCount"),
        total_tokens=usage.get("totalTokenCount"),
        reasoning_tokens=usage.get("thoughtsTokenCount"),
        cache_tokens=usage.get("cachedContentTokenCount"),
    )


class GeminiStreamDecoder(StreamDecoder):
    """Decoder for Gemini SSE streams (``alt=sse``)."""

    provider_name = "gemini"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._id_counts: Dict[str, int] = {}

    def _unique_id(self, base: str) -> str:
        seen = self._id_counts.get(base, 0)
        self._id_counts[base] = seen + 1
        return base if seen == 0 else f"{base}_{seen}"

    def feed(self, frame: Dict[str, Any]) -> Optional[StreamChunk]:
        error = frame.get("error")
        if error:
            raise self.stream_error(
                str(error.get("message") or "stream error"),
                vendor_code=error.get("status") or (str(error["code"]) if error.get("code") else None),
            )
        self.state.record_usage(parse_gemini_usage(frame.get("usageMetadata")))
        candidates = frame.get("candidates") or []
        if not candidates:
            return None
        candidate = candidates[0] or {}
        text: List[str] = []
        reasoning: List[str] = []
        for part in (candidate.get("content") or {}).get("parts") or ():
            call = part.get("functionCall")
            if call:
                name = call.get("name") or ""
                self.state.add_complete_tool_call(self._unique_id(call.get("id") or name), name, call.get("args"))
            elif "text" in part:
                (reasoning if part.get("thought") else text).append(part.get("text") or "")
        finish = candidate.get("finishReason")
        if finish:
            return self.state.terminal_chunk(
                map_finish_reason(finish, GEMINI_FINISH_REASONS),
                "".join(text),
                "".join(reasoning),
            )
        return self.state.extend("".join(text), "".join(reasoning))


__all__ = ["GEMINI_FINISH_REASONS", "GeminiStreamDecoder", "parse_gemini_usage"]
