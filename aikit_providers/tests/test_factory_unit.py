from __future__ import annotations

import pytest

import aikit_providers
from aikit_providers.anthropic import AnthropicProvider
from aikit_providers.base.errors import ConfigurationError
from aikit_providers.base.factory import ProviderFactory, UnknownProviderError, create_provider
from aikit_providers.gemini import GeminiProvider
from aikit_providers.openai import OpenAIProvider, OpenAIResponsesProvider


@pytest.mark.parametrize(
    "name,cls",
    [
        ("openai", OpenAIProvider),
        ("OpenAI", OpenAIProvider),
        ("openai-responses", OpenAIResponsesProvider),
        ("openai_responses", OpenAIResponsesProvider),
        ("anthropic", AnthropicProvider),
        ("gemini", GeminiProvider),
        ("google", GeminiProvider),
    ],
)
def test_create_by_name_and_alias(name, cls):
    provider = create_provider(name, api_key="key-unit")
    assert isinstance(provider, cls)  # nosec B101


def test_unknown_provider_lists_supported_names():
    with pytest.raises(UnknownProviderError) as info:
        ProviderFactory.create("mistral", api_key="key-unit")
    assert "mistral" in str(info.value)  # nosec B101
    assert "anthropic" in str(info.value)  # nosec B101


def test_constructor_type_error_is_unknown_provider_error():
    with pytest.raises(UnknownProviderError) as info:
        ProviderFactory.create("openai", config=42)
    assert "constructor" in str(info.value)  # nosec B101


def test_configuration_errors_propagate_unwrapped():
    with pytest.raises(ConfigurationError):
        ProviderFactory.create("anthropic")


def test_env_key_is_picked_up(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    provider = ProviderFactory.create("openai-responses")
    assert provider.config.api_key == "sk-from-env"  # nosec B101


def test_supported_is_deterministic():
    assert ProviderFactory.supported() == (  # nosec B101
        "openai",
        "openai-responses",
        "anthropic",
        "gemini",
        "google",
        "openai_responses",
    )


def test_top_level_create():
    provider = aikit_providers.create("gemini", api_key="g-unit", base_url="https://proxy.local/v1beta/")
    assert isinstance(provider, aikit_providers.LLMProvider)  # nosec B101
    assert provider.base_url == "https://proxy.local/v1beta"  # nosec B101
