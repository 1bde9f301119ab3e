"""End-to-end ``generate`` tests against ``httpx.MockTransport``.

Each test wires a real adapter to a canned vendor response and checks the
chunks, the outgoing request and the structured log events.
"""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from aikit_providers import (
    AnthropicOptions,
    ConfigurationError,
    FinishReason,
    LLMProvider,
    ProviderStreamError,
    ProviderTimeoutError,
    RequestError,
    ToolCall,
    collect_stream,
    create_tool,
    user_text,
)
from aikit_providers.anthropic import AnthropicProvider
from aikit_providers.gemini import GeminiProvider
from aikit_providers.openai import OpenAIProvider, OpenAIResponsesProvider

from test_http_transport import ScriptedStream

CHAT_FRAMES = [
    {"choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}, "finish_reason": None}]},
    {"choices": [{"index": 0, "delta": {"content": "Hello"}, "finish_reason": None}]},
    {"choices": [{"index": 0, "delta": {"content": "!"}, "finish_reason": None}]},
    {"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]},
    {"choices": [], "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}},
]


class _Recorder:
    """Request handler returning queued responses and keeping every request."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    @property
    def body(self) -> dict:
        return json.loads(self.requests[-1].content)


async def _chunks(provider, messages, options):
    return [chunk async for chunk in provider.generate(messages, options)]


@pytest.mark.asyncio
async def test_openai_chat_stream_end_to_end(mock_transport, sse_response, log_capture):
    recorder = _Recorder(sse_response(CHAT_FRAMES, done=True))
    provider = OpenAIProvider(api_key="sk-unit", organization="org-1", transport=mock_transport(recorder))
    chunks = await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o", "include_usage": True})

    assert [c.delta for c in chunks] == ["Hello", "!", ""]  # nosec B101
    assert chunks[-1].content == "Hello!"  # nosec B101
    assert chunks[-1].finish_reason is FinishReason.STOP  # nosec B101
    assert chunks[-1].usage.total_tokens == 5  # nosec B101

    request = recorder.requests[0]
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert request.headers["authorization"] == "Bearer sk-unit"  # nosec B101
    assert request.headers["openai-organization"] == "org-1"  # nosec B101
    assert request.headers["accept"] == "text/event-stream"  # nosec B101
    assert recorder.body["stream_options"] == {"include_usage": True}  # nosec B101

    start = log_capture.events("stream.start")[-1]
    end = log_capture.events("stream.end")[-1]
    assert start["provider"] == "openai" and start["model"] == "gpt-4o"  # nosec B101
    assert start["messages"] == 1  # nosec B101
    assert end["emitted"] == 3  # nosec B101
    assert end["finish_reason"] == "stop"  # nosec B101
    assert end["tokens"] == {"input_tokens": 3, "output_tokens": 2, "total_tokens": 5}  # nosec B101


@pytest.mark.asyncio
async def test_responses_provider_hits_responses_endpoint(mock_transport, sse_response):
    frames = [
        {"type": "response.output_text.delta", "delta": "ok"},
        {"type": "response.completed", "response": {"status": "completed"}},
    ]
    recorder = _Recorder(sse_response(frames))
    provider = OpenAIResponsesProvider(api_key="sk-unit", transport=mock_transport(recorder))
    result = await collect_stream(provider.generate([user_text("Hi")], {"model": "gpt-4.1"}))
    assert result.content == "ok"  # nosec B101
    assert recorder.requests[0].url.path == "/v1/responses"  # nosec B101
    assert recorder.body["input"][0]["role"] == "user"  # nosec B101


@pytest.mark.asyncio
async def test_anthropic_tool_use_end_to_end(mock_transport, sse_response):
    frames = [
        {"type": "message_start", "message": {"usage": {"input_tokens": 9}}},
        {"type": "content_block_start", "index": 0, "content_block": {"type": "tool_use", "id": "toolu_1", "name": "get_weather"}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "input_json_delta", "partial_json": '{"city":'}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "input_json_delta", "partial_json": '"Lima"}'}},
        {"type": "content_block_stop", "index": 0},
        {"type": "message_delta", "delta": {"stop_reason": "tool_use"}, "usage": {"output_tokens": 14}},
        {"type": "message_stop"},
    ]
    recorder = _Recorder(sse_response(frames))
    provider = AnthropicProvider(
        api_key="ak-unit",
        beta=["prompt-caching-2024-07-31", "output-128k-2025-02-19"],
        transport=mock_transport(recorder),
    )
    opts = AnthropicOptions(model="claude-3-5-sonnet-latest", tools=[create_tool("get_weather")])
    result = await collect_stream(provider.generate([user_text("Weather in Lima?")], opts))

    assert result.tool_calls == [ToolCall(id="toolu_1", name="get_weather", arguments={"city": "Lima"})]  # nosec B101
    assert result.finish_reason is FinishReason.TOOL_USE  # nosec B101
    assert result.usage.input_tokens == 9 and result.usage.output_tokens == 14  # nosec B101

    request = recorder.requests[0]
    assert str(request.url) == "https://api.anthropic.com/v1/messages"  # nosec B101
    assert request.headers["x-api-key"] == "ak-unit"  # nosec B101
    assert request.headers["anthropic-version"] == "2023-06-01"  # nosec B101
    assert request.headers["anthropic-beta"] == "prompt-caching-2024-07-31,output-128k-2025-02-19"  # nosec B101
    assert recorder.body["tools"][0]["name"] == "get_weather"  # nosec B101


@pytest.mark.asyncio
async def test_gemini_key_travels_in_header(mock_transport, sse_response, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-env-key")
    frames = [{"candidates": [{"content": {"parts": [{"text": "Ciao"}]}, "finishReason": "STOP"}]}]
    recorder = _Recorder(sse_response(frames))
    provider = GeminiProvider(transport=mock_transport(recorder))
    chunks = await _chunks(provider, [user_text("Hi")], {"model": "models/gemini-2.0-flash"})

    assert chunks[-1].content == "Ciao"  # nosec B101
    request = recorder.requests[0]
    assert request.url.path == "/v1beta/models/gemini-2.0-flash:streamGenerateContent"  # nosec B101
    assert request.url.params["alt"] == "sse"  # nosec B101
    assert "key" not in request.url.params  # nosec B101
    assert request.headers["x-goog-api-key"] == "g-env-key"  # nosec B101


def test_providers_satisfy_protocol():
    provider = OpenAIProvider(api_key="sk-unit")
    assert isinstance(provider, LLMProvider)  # nosec B101
    assert provider.provider_name == "openai"  # nosec B101


def test_missing_api_key_fails_at_construction():
    with pytest.raises(ConfigurationError) as info:
        AnthropicProvider()
    assert "ANTHROPIC_API_KEY" in info.value.message  # nosec B101
    with pytest.raises(ConfigurationError):
        OpenAIProvider(api_key="   ")


def test_invalid_config_fields_fail_at_construction():
    with pytest.raises(ConfigurationError) as info:
        OpenAIProvider(api_key="sk-unit", timeout=-1)
    assert "timeout" in info.value.message  # nosec B101


@pytest.mark.asyncio
async def test_missing_model_fails_before_any_request(mock_transport, sse_response):
    recorder = _Recorder(sse_response(CHAT_FRAMES))
    provider = OpenAIProvider(api_key="sk-unit", transport=mock_transport(recorder))
    with pytest.raises(ConfigurationError) as info:
        await _chunks(provider, [user_text("Hi")], {"temperature": 0.1})
    assert info.value.message == "a non-empty model is required"  # nosec B101
    with pytest.raises(ConfigurationError):
        await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o", "temperature": 9})
    assert recorder.requests == []  # nosec B101


@pytest.mark.asyncio
async def test_default_options_merge_with_call_options(mock_transport, sse_response):
    recorder = _Recorder(sse_response(CHAT_FRAMES), sse_response(CHAT_FRAMES))
    provider = OpenAIProvider(
        api_key="sk-unit",
        default_options={"model": "gpt-4o-mini", "temperature": 0.2},
        transport=mock_transport(recorder),
    )
    await _chunks(provider, [user_text("Hi")], None)
    assert recorder.body["model"] == "gpt-4o-mini"  # nosec B101
    assert recorder.body["temperature"] == 0.2  # nosec B101
    await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o"})
    assert recorder.body["model"] == "gpt-4o"  # nosec B101
    assert recorder.body["temperature"] == 0.2  # nosec B101


@pytest.mark.asyncio
async def test_http_error_status_rejects_before_any_chunk(mock_transport, log_capture):
    recorder = _Recorder(httpx.Response(400, json={"error": {"message": "bad model"}}))
    provider = OpenAIProvider(api_key="sk-unit", transport=mock_transport(recorder))
    received = []
    with pytest.raises(RequestError) as info:
        async for chunk in provider.generate([user_text("Hi")], {"model": "nope"}):
            received.append(chunk)  # pragma: no cover
    assert received == []  # nosec B101
    assert info.value.status == 400  # nosec B101
    assert "bad model" in info.value.body  # nosec B101
    error = log_capture.events("stream.error")[-1]
    assert error["error_code"] == "validation"  # nosec B101
    assert error["emitted"] == 0  # nosec B101


@pytest.mark.asyncio
async def test_retryable_status_is_retried_up_to_max_retries(mock_transport, sse_response, monkeypatch, log_capture):
    async def _no_sleep(delay):
        return None

    monkeypatch.setattr(asyncio, "sleep", _no_sleep)
    recorder = _Recorder(httpx.Response(529, text="overloaded"), sse_response(CHAT_FRAMES))
    provider = OpenAIProvider(api_key="sk-unit", max_retries=1, transport=mock_transport(recorder))
    chunks = await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o"})
    assert chunks[-1].finish_reason is FinishReason.STOP  # nosec B101
    assert len(recorder.requests) == 2  # nosec B101
    attempts = log_capture.events("retry.attempt")
    assert attempts[0]["error_code"] == "unavailable"  # nosec B101
    assert attempts[0]["will_retry"] is True  # nosec B101


@pytest.mark.asyncio
async def test_no_retry_by_default(mock_transport):
    recorder = _Recorder(httpx.Response(503, text="busy"), httpx.Response(503, text="busy"))
    provider = OpenAIProvider(api_key="sk-unit", transport=mock_transport(recorder))
    with pytest.raises(RequestError):
        await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o"})
    assert len(recorder.requests) == 1  # nosec B101


@pytest.mark.asyncio
async def test_vendor_error_frame_keeps_partial_chunks(mock_transport, sse_response, log_capture):
    frames = [
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Par"}},
        {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
    ]
    provider = AnthropicProvider(api_key="ak-unit", transport=mock_transport(_Recorder(sse_response(frames))))
    received = []
    with pytest.raises(ProviderStreamError) as info:
        async for chunk in provider.generate([user_text("Hi")], {"model": "claude"}):
            received.append(chunk)
    assert [c.delta for c in received] == ["Par"]  # nosec B101
    assert info.value.vendor_code == "overloaded_error"  # nosec B101
    error = log_capture.events("stream.error")[-1]
    assert error["error_code"] == "stream"  # nosec B101
    assert error["emitted"] == 1  # nosec B101


@pytest.mark.asyncio
async def test_truncated_body_raises_incomplete_stream(mock_transport, sse_response):
    frames = [{"candidates": [{"content": {"parts": [{"text": "half"}]}}]}]
    provider = GeminiProvider(api_key="g-unit", transport=mock_transport(_Recorder(sse_response(frames))))
    with pytest.raises(ProviderStreamError) as info:
        await _chunks(provider, [user_text("Hi")], {"model": "gemini-2.0-flash"})
    assert info.value.vendor_code == "incomplete_stream"  # nosec B101


@pytest.mark.asyncio
async def test_malformed_frames_are_skipped(mock_transport, sse_response):
    frames = ["{not json", *CHAT_FRAMES]
    provider = OpenAIProvider(api_key="sk-unit", transport=mock_transport(_Recorder(sse_response(frames, done=True))))
    chunks = await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o"})
    assert chunks[-1].content == "Hello!"  # nosec B101


@pytest.mark.asyncio
async def test_abandoning_iteration_closes_the_response(mock_transport):
    body = "".join(f"data: {json.dumps(f)}\n\n" for f in CHAT_FRAMES[1:3]).encode()
    stream = ScriptedStream([body], hang=True)
    provider = OpenAIProvider(
        api_key="sk-unit", transport=mock_transport(lambda request: httpx.Response(200, stream=stream))
    )
    gen = provider.generate([user_text("Hi")], {"model": "gpt-4o"})
    first = await gen.__anext__()
    assert first.delta == "Hello"  # nosec B101
    await gen.aclose()
    assert stream.closed  # nosec B101


@pytest.mark.asyncio
async def test_whole_call_timeout(mock_transport):
    body = f"data: {json.dumps(CHAT_FRAMES[1])}\n\n".encode()
    stream = ScriptedStream([body], hang=True)
    provider = OpenAIProvider(
        api_key="sk-unit",
        timeout=0.05,
        transport=mock_transport(lambda request: httpx.Response(200, stream=stream)),
    )
    received = []
    with pytest.raises(ProviderTimeoutError) as info:
        async for chunk in provider.generate([user_text("Hi")], {"model": "gpt-4o"}):
            received.append(chunk)
    assert isinstance(info.value, TimeoutError)  # nosec B101
    assert [c.delta for c in received] == ["Hello"]  # nosec B101
    assert stream.closed  # nosec B101


@pytest.mark.asyncio
async def test_task_cancellation_closes_the_response(mock_transport, log_capture):
    body = f"data: {json.dumps(CHAT_FRAMES[1])}\n\n".encode()
    stream = ScriptedStream([body], hang=True)
    provider = OpenAIProvider(
        api_key="sk-unit", transport=mock_transport(lambda request: httpx.Response(200, stream=stream))
    )
    first_chunk = asyncio.Event()

    async def consume():
        async for _ in provider.generate([user_text("Hi")], {"model": "gpt-4o"}):
            first_chunk.set()

    loop = asyncio.get_running_loop()
    task = asyncio.create_task(consume())
    await asyncio.wait_for(first_chunk.wait(), timeout=5)
    cancelled_at = loop.time()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert loop.time() - cancelled_at < 1.0  # nosec B101
    assert stream.closed  # nosec B101
    error = log_capture.events("stream.error")[-1]
    assert error["error_code"] == "cancelled"  # nosec B101
    assert error["emitted"] == 1  # nosec B101


@pytest.mark.asyncio
async def test_async_context_manager_closes_transport(mock_transport, sse_response):
    transport = mock_transport(_Recorder(sse_response(CHAT_FRAMES, done=True)))
    async with OpenAIProvider(api_key="sk-unit", transport=transport) as provider:
        await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o"})
        assert transport._client is not None  # nosec B101
    assert transport._client is None  # nosec B101


@pytest.mark.asyncio
async def test_config_headers_override_vendor_headers(mock_transport, sse_response):
    recorder = _Recorder(sse_response(CHAT_FRAMES))
    provider = OpenAIProvider(
        api_key="sk-unit",
        base_url="https://gateway.local/openai/",
        headers={"Authorization": "Bearer gateway-token", "x-trace": "1"},
        transport=mock_transport(recorder),
    )
    await _chunks(provider, [user_text("Hi")], {"model": "gpt-4o"})
    request = recorder.requests[0]
    assert str(request.url) == "https://gateway.local/openai/chat/completions"  # nosec B101
    assert request.headers["authorization"] == "Bearer gateway-token"  # nosec B101
    assert request.headers["x-trace"] == "1"  # nosec B101
