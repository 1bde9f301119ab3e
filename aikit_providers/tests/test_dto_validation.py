from __future__ import annotations

import pytest
from pydantic import ValidationError

from aikit_providers.base.dto import (
    AnthropicOptions,
    GeminiOptions,
    GenerationOptions,
    OpenAIChatOptions,
    ProviderConfig,
    ToolChoiceByName,
)
from aikit_providers.base.models import Tool


def test_generation_options_requires_model():
    with pytest.raises(ValidationError):
        GenerationOptions()
    with pytest.raises(ValidationError):
        GenerationOptions(model="")


@pytest.mark.parametrize(
    "field,value",
    [
        ("temperature", 2.5),
        ("top_p", 1.5),
        ("max_output_tokens", 0),
        ("top_k", 0),
    ],
)
def test_generation_options_range_checks(field, value):
    with pytest.raises(ValidationError):
        GenerationOptions(model="m", **{field: value})


def test_tool_choice_accepts_name_mapping():
    opts = GenerationOptions(model="m", tool_choice={"name": "lookup"})
    assert opts.tool_choice == ToolChoiceByName(name="lookup")  # nosec B101
    assert GenerationOptions(model="m", tool_choice="required").tool_choice == "required"  # nosec B101
    with pytest.raises(ValidationError):
        GenerationOptions(model="m", tool_choice="sometimes")


def test_merge_call_options_win_field_by_field():
    defaults = {"model": "gpt-4o-mini", "temperature": 0.2, "max_output_tokens": 100}
    call = GenerationOptions(model="gpt-4o", temperature=0.9)
    merged = OpenAIChatOptions.merge(defaults, call)
    assert isinstance(merged, OpenAIChatOptions)  # nosec B101
    assert merged.model == "gpt-4o"  # nosec B101
    assert merged.temperature == 0.9  # nosec B101
    assert merged.max_output_tokens == 100  # nosec B101


def test_merge_replaces_tools_wholesale():
    defaults = GenerationOptions(model="m", tools=[Tool(name="a"), Tool(name="b")])
    merged = defaults.merged_with({"tools": [Tool(name="c")]})
    assert [t.name for t in merged.tools] == ["c"]  # nosec B101


def test_merge_skips_none_in_mappings_and_drops_unknown_fields():
    merged = AnthropicOptions.merge({"model": "claude", "temperature": 0.5}, {"temperature": None, "seed": 3})
    assert merged.temperature == 0.5  # nosec B101
    assert not hasattr(merged, "seed")  # nosec B101


def test_merge_replays_vendor_options_against_other_vendor():
    gemini = GeminiOptions(model="gemini-2.0-flash", seed=7, temperature=0.1)
    as_anthropic = AnthropicOptions.merge(None, gemini)
    assert as_anthropic.model == "gemini-2.0-flash"  # nosec B101
    assert as_anthropic.temperature == 0.1  # nosec B101


def test_anthropic_thinking_budget_minimum():
    with pytest.raises(ValidationError):
        AnthropicOptions(model="claude", thinking_budget_tokens=100)
    assert AnthropicOptions(model="claude", thinking_budget_tokens=2048).thinking_budget_tokens == 2048  # nosec B101


def test_provider_config_validation():
    cfg = ProviderConfig(api_key="  sk-live  ", base_url="https://proxy.local/v1/")
    assert cfg.api_key == "sk-live"  # nosec B101
    assert cfg.base_url == "https://proxy.local/v1"  # nosec B101
    assert cfg.max_retries == 0  # nosec B101
    with pytest.raises(ValidationError):
        ProviderConfig(api_key="   ")
    with pytest.raises(ValidationError):
        ProviderConfig(api_key="k", timeout=0)
    with pytest.raises(ValidationError):
        ProviderConfig(api_key="k", max_retries=-1)
