from __future__ import annotations

import asyncio
import base64
import json
import struct

import httpx
import pytest

import aikit_providers
from aikit_providers.base.errors import ConfigurationError, ErrorCode, ProviderError, RequestError
from aikit_providers.base.factory import ProviderFactory, UnknownProviderError
from aikit_providers.base.interfaces import EmbeddingProvider
from aikit_providers.base.models import EmbeddingResult, GenerationUsage
from aikit_providers.gemini import GeminiEmbeddingProvider
from aikit_providers.openai import OpenAIEmbeddingProvider
from aikit_providers.openai.embeddings import decode_base64_vector


def _openai_payload(vectors, *, order=None, prompt_tokens=3):
    order = order if order is not None else range(len(vectors))
    return {
        "object": "list",
        "model": "text-embedding-3-small",
        "data": [{"object": "embedding", "index": i, "embedding": vectors[i]} for i in order],
        "usage": {"prompt_tokens": prompt_tokens, "total_tokens": prompt_tokens},
    }


@pytest.mark.asyncio
async def test_openai_embed_request_and_response(mock_transport, log_capture):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["accept"] = request.headers["accept"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_openai_payload([[0.1, 0.2], [0.3, 0.4]], order=[1, 0]))

    provider = OpenAIEmbeddingProvider(api_key="sk-unit", transport=mock_transport(handler))
    result = await provider.embed(["alpha", "beta"], {"model": "text-embedding-3-small", "dimensions": 2})

    assert seen["url"] == "https://api.openai.com/v1/embeddings"  # nosec B101
    assert seen["auth"] == "Bearer sk-unit"  # nosec B101
    assert seen["accept"] == "application/json"  # nosec B101
    assert seen["body"] == {"model": "text-embedding-3-small", "input": ["alpha", "beta"], "dimensions": 2}  # nosec B101
    assert result.vectors == [[0.1, 0.2], [0.3, 0.4]]  # nosec B101
    assert [e.index for e in result.embeddings] == [0, 1]  # nosec B101
    assert result.model == "text-embedding-3-small"  # nosec B101
    assert result.usage == GenerationUsage(input_tokens=3, total_tokens=3)  # nosec B101

    end = log_capture.events("embed.end")
    assert len(end) == 1  # nosec B101
    assert end[0]["emitted"] == 2  # nosec B101
    assert end[0]["dimensions"] == 2  # nosec B101
    assert log_capture.events("embed.start")[0]["texts"] == 2  # nosec B101


def test_decode_base64_vector():
    encoded = base64.b64encode(struct.pack("<3f", 1.0, -0.5, 0.25)).decode()
    assert decode_base64_vector(encoded) == [1.0, -0.5, 0.25]  # nosec B101


@pytest.mark.asyncio
async def test_openai_base64_encoding_is_decoded(mock_transport):
    encoded = base64.b64encode(struct.pack("<2f", 0.5, 2.0)).decode()

    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content)["encoding_format"] == "base64"  # nosec B101
        return httpx.Response(200, json=_openai_payload([encoded]))

    provider = OpenAIEmbeddingProvider(api_key="sk-unit", transport=mock_transport(handler))
    result = await provider.embed(["x"], {"model": "text-embedding-3-small", "encoding_format": "base64"})
    assert result.vectors == [[0.5, 2.0]]  # nosec B101


@pytest.mark.asyncio
async def test_gemini_batch_request_shape(mock_transport):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"embeddings": [{"values": [1, 2]}, {"values": [3, 4]}]})

    provider = GeminiEmbeddingProvider(api_key="g-unit", transport=mock_transport(handler))
    result = await provider.embed(
        ["q1", "q2"],
        {"model": "models/text-embedding-004", "task_type": "RETRIEVAL_QUERY", "dimensions": 2},
    )

    assert seen["url"] == (  # nosec B101
        "https://generativelanguage.googleapis.com/v1beta/models/text-embedding-004:batchEmbedContents"
    )
    assert "key=" not in seen["url"]  # nosec B101
    assert seen["key"] == "g-unit"  # nosec B101
    assert seen["body"]["requests"][0] == {  # nosec B101
        "model": "models/text-embedding-004",
        "content": {"parts": [{"text": "q1"}]},
        "taskType": "RETRIEVAL_QUERY",
        "outputDimensionality": 2,
    }
    assert result.vectors == [[1.0, 2.0], [3.0, 4.0]]  # nosec B101
    assert result.model == "models/text-embedding-004"  # nosec B101
    assert result.usage is None  # nosec B101


@pytest.mark.asyncio
async def test_inputs_above_batch_size_are_split_in_order(mock_transport):
    batches = []

    def handler(request: httpx.Request) -> httpx.Response:
        texts = [r["content"]["parts"][0]["text"] for r in json.loads(request.content)["requests"]]
        batches.append(texts)
        return httpx.Response(200, json={"embeddings": [{"values": [float(t)]} for t in texts]})

    provider = GeminiEmbeddingProvider(api_key="g-unit", transport=mock_transport(handler))
    texts = [str(i) for i in range(250)]
    result = await provider.embed(texts, {"model": "text-embedding-004"})

    assert [len(b) for b in batches] == [100, 100, 50]  # nosec B101
    assert [e.index for e in result.embeddings] == list(range(250))  # nosec B101
    assert result.embeddings[137] == EmbeddingResult(values=[137.0], index=137)  # nosec B101


@pytest.mark.asyncio
async def test_usage_is_summed_across_batches(mock_transport, monkeypatch):
    monkeypatch.setattr(OpenAIEmbeddingProvider, "max_batch_size", 2)

    def handler(request: httpx.Request) -> httpx.Response:
        count = len(json.loads(request.content)["input"])
        return httpx.Response(200, json=_openai_payload([[0.0]] * count, prompt_tokens=count * 2))

    provider = OpenAIEmbeddingProvider(api_key="sk-unit", transport=mock_transport(handler))
    result = await provider.embed(["a", "b", "c"], {"model": "text-embedding-3-small"})
    assert len(result.embeddings) == 3  # nosec B101
    assert result.usage == GenerationUsage(input_tokens=6, total_tokens=6)  # nosec B101


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "texts,options,fragment",
    [
        ([], {"model": "text-embedding-3-small"}, "at least one"),
        ("just a string", {"model": "text-embedding-3-small"}, "not a string"),
        (["ok", 3], {"model": "text-embedding-3-small"}, "every text"),
        (["ok"], {}, "model is required"),
        (["ok"], {"model": "text-embedding-3-small", "dimensions": 0}, "dimensions"),
    ],
)
async def test_invalid_input_fails_before_any_request(mock_transport, texts, options, fragment):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_openai_payload([[0.0]]))

    provider = OpenAIEmbeddingProvider(api_key="sk-unit", transport=mock_transport(handler))
    with pytest.raises(ConfigurationError) as info:
        await provider.embed(texts, options)
    assert fragment in info.value.message  # nosec B101
    assert calls == []  # nosec B101


@pytest.mark.asyncio
async def test_chat_model_from_environment_is_not_used(mock_transport, monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    provider = OpenAIEmbeddingProvider(api_key="sk-unit", transport=mock_transport(lambda r: httpx.Response(500)))
    with pytest.raises(ConfigurationError):
        await provider.embed(["a"])


@pytest.mark.asyncio
async def test_default_options_merge_with_call_options(mock_transport):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_openai_payload([[0.0]]))

    provider = OpenAIEmbeddingProvider(
        api_key="sk-unit",
        transport=mock_transport(handler),
        default_options={"model": "text-embedding-3-small", "dimensions": 64, "user": "u-1"},
    )
    await provider.embed(["a"])
    await provider.embed(["a"], {"model": "text-embedding-3-large"})
    assert bodies[0]["model"] == "text-embedding-3-small"  # nosec B101
    assert bodies[1] == {  # nosec B101
        "model": "text-embedding-3-large",
        "input": ["a"],
        "dimensions": 64,
        "user": "u-1",
    }


@pytest.mark.asyncio
async def test_vector_count_mismatch_is_provider_error(mock_transport, log_capture):
    transport = mock_transport(lambda r: httpx.Response(200, json=_openai_payload([[0.1]])))
    provider = OpenAIEmbeddingProvider(api_key="sk-unit", transport=transport)
    with pytest.raises(ProviderError) as info:
        await provider.embed(["a", "b"], {"model": "text-embedding-3-small"})
    assert info.value.code is ErrorCode.SERVER_ERROR  # nosec B101
    assert not isinstance(info.value, RequestError)  # nosec B101
    assert log_capture.events("embed.error")[0]["error_code"] == "server_error"  # nosec B101


@pytest.mark.asyncio
async def test_error_status_is_request_error_and_logged(mock_transport, log_capture):
    transport = mock_transport(lambda r: httpx.Response(400, json={"error": {"message": "bad input"}}))
    provider = GeminiEmbeddingProvider(api_key="g-unit", transport=transport)
    with pytest.raises(RequestError) as info:
        await provider.embed(["a"], {"model": "text-embedding-004"})
    assert info.value.status == 400  # nosec B101
    assert "bad input" in info.value.body  # nosec B101
    errors = log_capture.events("embed.error")
    assert len(errors) == 1  # nosec B101
    assert errors[0]["emitted"] == 0  # nosec B101
    assert log_capture.events("embed.end") == []  # nosec B101


@pytest.mark.asyncio
async def test_embed_retries_transient_status(mock_transport, monkeypatch):
    async def _no_sleep(delay):
        return None

    monkeypatch.setattr(asyncio, "sleep", _no_sleep)
    statuses = [429, 200]

    def handler(request: httpx.Request) -> httpx.Response:
        status = statuses.pop(0)
        return httpx.Response(status, json=_openai_payload([[1.0]]) if status == 200 else {"error": "slow down"})

    provider = OpenAIEmbeddingProvider(api_key="sk-unit", max_retries=1, transport=mock_transport(handler))
    result = await provider.embed(["a"], {"model": "text-embedding-3-small"})
    assert result.vectors == [[1.0]]  # nosec B101


@pytest.mark.parametrize(
    "name,cls",
    [("openai", OpenAIEmbeddingProvider), ("gemini", GeminiEmbeddingProvider), ("google", GeminiEmbeddingProvider)],
)
def test_factory_creates_embedding_providers(name, cls):
    provider = aikit_providers.create_embeddings(name, api_key="key-unit")
    assert isinstance(provider, cls)  # nosec B101
    assert isinstance(provider, EmbeddingProvider)  # nosec B101


def test_factory_rejects_streaming_only_names_for_embeddings():
    with pytest.raises(UnknownProviderError) as info:
        ProviderFactory.create_embeddings("anthropic", api_key="key-unit")
    assert "anthropic" in str(info.value)  # nosec B101
    assert ProviderFactory.supported_embeddings() == ("openai", "gemini", "google")  # nosec B101


def test_missing_api_key_is_configuration_error():
    with pytest.raises(ConfigurationError):
        GeminiEmbeddingProvider()
