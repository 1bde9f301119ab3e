"""
Per-generation accumulation state shared by the vendor decoders.

Purpose
-------
Every vendor decoder owns exactly one :class:`StreamState` for the lifetime of
a single ``generate`` call. The state holds:

- ``accumulated_text``: the running concatenation of every text delta;
- ``pending_tool_calls``: calls under construction, keyed by the vendor's
  per-call index or id, each buffering its argument fragments;
- the finalized tool calls, the reasoning text, token usage and the finish
  reason.

Tool-call arguments are parsed exactly once, when the vendor signals that the
call is complete (or when the generation ends). A call is finalized at most
once per id, and a finalized call is reported on exactly one chunk.

Failure modes
-------------
- :class:`ToolArgumentParseError` when the concatenated fragments are not a
  JSON object. The pending entry is discarded first, so the error is raised
  once and never retried against stale fragments.
- ``RuntimeError`` if a second terminal chunk is requested (programming error
  in a decoder).
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional

from ..errors import ToolArgumentParseError
from ..models import FinishReason, GenerationUsage, ReasoningDelta, StreamChunk, ToolCall


def parse_tool_arguments(
    raw: Optional[str],
    tool_call_id: str,
    *,
    provider: str = "unknown",
    model: Optional[str] = None,
) -> Dict[str, Any]:
    """Parse a complete tool-call argument string into a mapping.

    An empty or whitespace-only string means "no arguments" and yields ``{}``.
    """
    if raw is None or not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ToolArgumentParseError(
            message=f"arguments for tool call '{tool_call_id}' are not valid JSON: {exc.msg}",
            provider=provider,
            model=model,
            raw=exc,
            tool_call_id=tool_call_id,
            raw_arguments=raw,
        ) from exc
    if not isinstance(value, dict):
        raise ToolArgumentParseError(
            message=f"arguments for tool call '{tool_call_id}' must be a JSON object, got {type(value).__name__}",
            provider=provider,
            model=model,
            tool_call_id=tool_call_id,
            raw_arguments=raw,
        )
    return value


@dataclass
class PendingToolCall:
    """A tool call whose arguments are still streaming in."""

    id: str
    name: str
    fragments: List[str] = field(default_factory=list)

    def arguments_text(self) -> str:
        return "".join(self.fragments)


class StreamState:
    """Mutable accumulation state for one generation."""

    def __init__(self, provider: str = "unknown", model: Optional[str] = None) -> None:
        self.provider = provider
        self.model = model
        self.accumulated_text = ""
        self.reasoning_text = ""
        self.pending_tool_calls: Dict[Hashable, PendingToolCall] = {}
        self.tool_calls: List[ToolCall] = []
        self.finish_reason: Optional[FinishReason] = None
        self.usage: Optional[GenerationUsage] = None
        self.terminated = False
        self._finalized_ids: set[str] = set()
        self._unreported: List[ToolCall] = []

    # ------------------------------------------------------------------ text
    def add_text(self, delta: str) -> StreamChunk:
        self.accumulated_text += delta
        return self.chunk(delta)

    def extend(self, text: str = "", reasoning: str = "") -> Optional[StreamChunk]:
        """Apply the text and reasoning deltas of one frame as a single chunk.

        Returns ``None`` when the frame carried nothing to report (no text,
        no reasoning, no newly finalized tool calls).
        """
        reasoning_delta = None
        if reasoning:
            self.reasoning_text += reasoning
            reasoning_delta = ReasoningDelta(content=self.reasoning_text, delta=reasoning)
        self.accumulated_text += text
        if not text and reasoning_delta is None and not self._unreported:
            return None
        return self.chunk(text, reasoning=reasoning_delta)

    # ------------------------------------------------------------ tool calls
    def start_tool_call(self, key: Hashable, call_id: str, name: str) -> PendingToolCall:
        """Register a call under construction; repeated starts fill in blanks."""
        pending = self.pending_tool_calls.get(key)
        if pending is None:
            pending = PendingToolCall(id=call_id, name=name)
            self.pending_tool_calls[key] = pending
        else:
            pending.id = pending.id or call_id
            pending.name = pending.name or name
        return pending

    def append_arguments(self, key: Hashable, fragment: str) -> bool:
        """Buffer an argument fragment; returns ``False`` for an unknown call."""
        pending = self.pending_tool_calls.get(key)
        if pending is None:
            return False
        if fragment:
            pending.fragments.append(fragment)
        return True

    def finalize_tool_call(self, key: Hashable, arguments: Optional[str] = None) -> Optional[ToolCall]:
        """Parse and finalize the call registered under ``key``.

        ``arguments`` replaces the buffered fragments when the vendor sends the
        complete argument string with its "done" signal.
        """
        pending = self.pending_tool_calls.pop(key, None)
        if pending is None:
            return None
        raw = arguments if arguments is not None else pending.arguments_text()
        parsed = parse_tool_arguments(raw, pending.id, provider=self.provider, model=self.model)
        return self._record(ToolCall(id=pending.id, name=pending.name, arguments=parsed))

    def add_complete_tool_call(self, call_id: str, name: str, arguments: Optional[Dict[str, Any]]) -> Optional[ToolCall]:
        """Record a call that arrived whole (arguments already structured)."""
        return self._record(ToolCall(id=call_id, name=name, arguments=dict(arguments or {})))

    def finalize_all(self) -> List[ToolCall]:
        """Finalize every pending call in registration order."""
        return [call for key in list(self.pending_tool_calls) if (call := self.finalize_tool_call(key)) is not None]

    def has_finalized(self, call_id: str) -> bool:
        return call_id in self._finalized_ids

    def _record(self, call: ToolCall) -> Optional[ToolCall]:
        if call.id in self._finalized_ids:
            return None
        self._finalized_ids.add(call.id)
        self.tool_calls.append(call)
        self._unreported.append(call)
        return call

    def has_unreported_tool_calls(self) -> bool:
        return bool(self._unreported)

    # ----------------------------------------------------------------- usage
    def record_usage(self, usage: Optional[GenerationUsage]) -> None:
        if usage is None or usage.is_empty():
            return
        self.usage = usage if self.usage is None else self.usage.merge(usage)

    # ---------------------------------------------------------------- chunks
    def chunk(self, delta: str = "", *, reasoning: Optional[ReasoningDelta] = None) -> StreamChunk:
        """Build a non-terminal chunk, attaching newly finalized tool calls."""
        calls, self._unreported = self._unreported, []
        return StreamChunk(
            content=self.accumulated_text,
            delta=delta,
            tool_calls=calls or None,
            reasoning=reasoning,
        )

    def terminal_chunk(self, reason: FinishReason, delta: str = "", reasoning: str = "") -> StreamChunk:
        """Build the single terminal chunk, flushing any pending tool calls.

        ``delta`` and ``reasoning`` are carried by the terminal frame itself
        (Gemini sends the last parts together with its ``finishReason``).
        """
        if self.terminated:
            raise RuntimeError("terminal chunk already emitted for this generation")
        self.accumulated_text += delta
        reasoning_delta = None
        if reasoning:
            self.reasoning_text += reasoning
            reasoning_delta = ReasoningDelta(content=self.reasoning_text, delta=reasoning)
        self.finalize_all()
        self.terminated = True
        self.finish_reason = reason
        calls, self._unreported = self._unreported, []
        return StreamChunk(
            content=self.accumulated_text,
            delta=delta,
            finish_reason=reason,
            tool_calls=calls or None,
            reasoning=reasoning_delta,
            usage=self.usage,
        )


__all__ = ["PendingToolCall", "StreamState", "parse_tool_arguments"]
