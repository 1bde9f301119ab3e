from __future__ import annotations

import logging

import pytest

from aikit_providers.base.errors import ToolArgumentParseError
from aikit_providers.base.models import FinishReason, GenerationUsage, ToolCall
from aikit_providers.base.streaming import (
    StreamState,
    iter_json_frames,
    iter_sse_data,
    parse_sse_line,
    parse_tool_arguments,
)


def test_parse_sse_line():
    assert parse_sse_line('data: {"a": 1}\n') == '{"a": 1}'  # nosec B101
    assert parse_sse_line("data:[DONE]") == "[DONE]"  # nosec B101
    assert parse_sse_line("data: ") is None  # nosec B101
    assert parse_sse_line("event: message_start") is None  # nosec B101
    assert parse_sse_line(": keep-alive") is None  # nosec B101
    assert parse_sse_line("") is None  # nosec B101


@pytest.mark.asyncio
async def test_iter_sse_data_stops_at_done(body_lines):
    lines = body_lines("event: x", "data: 1", "", "data:", "data: 2", "data: [DONE]", "data: 3")
    assert [d async for d in iter_sse_data(lines)] == ["1", "2"]  # nosec B101


@pytest.mark.asyncio
async def test_iter_json_frames_skips_malformed(body_lines, caplog):
    logger = logging.getLogger("sse_unit")
    logger.setLevel(logging.DEBUG)
    lines = body_lines('data: {"n": 1}', "data: {not json", "data: [1, 2]", 'data: {"n": 2}')
    with caplog.at_level(logging.DEBUG, logger="sse_unit"):
        frames = [f async for f in iter_json_frames(lines, logger)]
    assert frames == [{"n": 1}, {"n": 2}]  # nosec B101
    assert any("malformed" in r.getMessage() for r in caplog.records)  # nosec B101


def test_parse_tool_arguments():
    assert parse_tool_arguments("", "c1") == {}  # nosec B101
    assert parse_tool_arguments("   ", "c1") == {}  # nosec B101
    assert parse_tool_arguments('{"x": 1}', "c1") == {"x": 1}  # nosec B101
    with pytest.raises(ToolArgumentParseError) as info:
        parse_tool_arguments('{"x": ', "c1", provider="openai")
    assert info.value.tool_call_id == "c1"  # nosec B101
    assert info.value.raw_arguments == '{"x": '  # nosec B101
    with pytest.raises(ToolArgumentParseError):
        parse_tool_arguments("[1, 2]", "c2")


def test_text_accumulates_and_extend_skips_empty_frames():
    state = StreamState("openai", "m")
    first = state.extend("Hel")
    second = state.extend("lo")
    assert (first.content, first.delta) == ("Hel", "Hel")  # nosec B101
    assert (second.content, second.delta) == ("Hello", "lo")  # nosec B101
    assert state.extend() is None  # nosec B101


def test_reasoning_is_cumulative():
    state = StreamState()
    state.extend(reasoning="think ")
    chunk = state.extend(reasoning="more")
    assert chunk.reasoning.content == "think more"  # nosec B101
    assert chunk.reasoning.delta == "more"  # nosec B101
    assert chunk.content == ""  # nosec B101


def test_tool_call_fragments_finalize_once():
    state = StreamState("anthropic")
    state.start_tool_call(0, "toolu_1", "get_weather")
    assert state.append_arguments(0, '{"city": ')  # nosec B101
    assert state.append_arguments(0, '"Oslo"}')  # nosec B101
    assert not state.append_arguments(5, "x")  # nosec B101
    call = state.finalize_tool_call(0)
    assert call == ToolCall(id="toolu_1", name="get_weather", arguments={"city": "Oslo"})  # nosec B101
    assert state.finalize_tool_call(0) is None  # nosec B101
    # Reported on exactly one chunk.
    assert state.chunk().tool_calls == [call]  # nosec B101
    assert state.chunk().tool_calls is None  # nosec B101
    assert state.has_finalized("toolu_1")  # nosec B101


def test_duplicate_ids_are_recorded_once():
    state = StreamState()
    assert state.add_complete_tool_call("c1", "f", {"a": 1}) is not None  # nosec B101
    assert state.add_complete_tool_call("c1", "f", {"a": 2}) is None  # nosec B101
    assert len(state.tool_calls) == 1  # nosec B101


def test_done_arguments_replace_fragments():
    state = StreamState()
    state.start_tool_call("call_1", "call_1", "f")
    state.append_arguments("call_1", '{"partial"')
    call = state.finalize_tool_call("call_1", '{"full": true}')
    assert call.arguments == {"full": True}  # nosec B101


def test_invalid_arguments_raise_and_discard_pending():
    state = StreamState("openai", "gpt-4o")
    state.start_tool_call(0, "call_1", "f")
    state.append_arguments(0, "{broken")
    with pytest.raises(ToolArgumentParseError):
        state.finalize_tool_call(0)
    assert state.pending_tool_calls == {}  # nosec B101


def test_terminal_chunk_flushes_pending_calls_and_usage():
    state = StreamState()
    state.extend("hi")
    state.start_tool_call(0, "c1", "f")
    state.record_usage(GenerationUsage(input_tokens=3))
    state.record_usage(GenerationUsage(output_tokens=4))
    state.record_usage(GenerationUsage())
    final = state.terminal_chunk(FinishReason.TOOL_USE, delta="!")
    assert final.finish_reason is FinishReason.TOOL_USE  # nosec B101
    assert final.content == "hi!"  # nosec B101
    assert final.delta == "!"  # nosec B101
    assert final.tool_calls == [ToolCall(id="c1", name="f", arguments={})]  # nosec B101
    assert final.usage == GenerationUsage(input_tokens=3, output_tokens=4)  # nosec B101
    with pytest.raises(RuntimeError):
        state.terminal_chunk(FinishReason.STOP)
