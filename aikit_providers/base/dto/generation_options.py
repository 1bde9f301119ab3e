"""
Pydantic DTOs for generation options.

Purpose
-------
Define one shared options model (:class:`GenerationOptions`) understood by
every vendor, plus one subclass per vendor carrying that vendor's extension
knobs. Vendor subclasses are structural supersets of the shared model, so a
caller can always pass the base type to any provider and opt into vendor
extras only where needed.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_fields_set`` tracking.

Merging
-------
Providers merge construction-time defaults with call-time options using
:meth:`GenerationOptions.merge`. The merge is shallow and field-by-field:
any field the caller explicitly set wins, including nested structures such as
``tools`` or ``response_format`` which are replaced wholesale, never
deep-merged.

Failure modes
-------------
- ``pydantic.ValidationError`` on out-of-range values or an empty ``model``.
  The provider facade converts this into ``ConfigurationError``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models import Tool

OptionsT = TypeVar("OptionsT", bound="GenerationOptions")


class ToolChoiceByName(BaseModel):
    """Force the model to call exactly the named tool."""

    name: str = Field(..., min_length=1)


ToolChoice = Union[Literal["auto", "required", "none"], ToolChoiceByName]


class GenerationOptions(BaseModel):
    """Options understood by every vendor.

    Attributes:
        model: Target model identifier (mandatory, non-empty).
        max_output_tokens: Upper bound on generated tokens.
        temperature: Sampling temperature within ``[0.0, 2.0]``.
        top_p: Nucleus sampling mass within ``[0.0, 1.0]``.
        top_k: Top-k sampling (ignored by vendors that lack it).
        stop_sequences: Sequences that end the generation.
        tools: Tools offered to the model for this request.
        tool_choice: ``"auto"``, ``"required"``, ``"none"`` or
            ``ToolChoiceByName``; a plain ``{"name": ...}`` mapping is accepted.
    """

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    model: str = Field(..., min_length=1)
    max_output_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=None, gt=0)
    stop_sequences: Optional[List[str]] = None
    tools: Optional[List[Tool]] = None
    tool_choice: Optional[ToolChoice] = None

    def explicit_fields(self) -> Dict[str, Any]:
        """Return only the fields the caller set, with their live values."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    @classmethod
    def merge(
        cls: Type[OptionsT],
        defaults: Union["GenerationOptions", Mapping[str, Any], None],
        overrides: Union["GenerationOptions", Mapping[str, Any], None],
    ) -> OptionsT:
        """Shallow-merge ``defaults`` and ``overrides`` into an instance of ``cls``.

        Either side may be an options model (any vendor subclass) or a plain
        mapping. Fields unknown to ``cls`` are dropped silently so options
        written for one vendor can be replayed against another.
        """
        merged: Dict[str, Any] = {}
        for source in (defaults, overrides):
            if source is None:
                continue
            if isinstance(source, GenerationOptions):
                merged.update(source.explicit_fields())
            else:
                merged.update({k: v for k, v in source.items() if v is not None})
        return cls.model_validate(merged)

    def merged_with(self: OptionsT, overrides: Union["GenerationOptions", Mapping[str, Any], None]) -> OptionsT:
        """Return a copy of ``self`` with ``overrides`` applied on top."""
        return type(self).merge(self, overrides)


class OpenAIChatOptions(GenerationOptions):
    """OpenAI Chat Completions extensions."""

    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    user: Optional[str] = None
    logprobs: Optional[bool] = None
    top_logprobs: Optional[int] = Field(default=None, ge=0, le=20)
    seed: Optional[int] = None
    response_format: Optional[Dict[str, Any]] = None
    logit_bias: Optional[Dict[str, float]] = None
    n: Optional[int] = Field(default=None, gt=0)
    modalities: Optional[List[str]] = None
    audio: Optional[Dict[str, Any]] = None
    max_completion_tokens: Optional[int] = Field(default=None, gt=0)
    prediction: Optional[Dict[str, Any]] = None
    web_search_options: Optional[Dict[str, Any]] = None
    include_usage: Optional[bool] = None
    reasoning_effort: Optional[Literal["minimal", "low", "medium", "high"]] = None
    parallel_tool_calls: Optional[bool] = None


class OpenAIResponsesOptions(GenerationOptions):
    """OpenAI Responses API extensions."""

    background: Optional[bool] = None
    include: Optional[List[str]] = None
    instructions: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None
    parallel_tool_calls: Optional[bool] = None
    previous_response_id: Optional[str] = None
    reasoning_effort: Optional[Literal["minimal", "low", "medium", "high"]] = None
    service_tier: Optional[str] = None
    store: Optional[bool] = None
    text_format: Optional[Dict[str, Any]] = None
    truncation: Optional[Literal["auto", "disabled"]] = None
    user: Optional[str] = None


class AnthropicOptions(GenerationOptions):
    """Anthropic Messages API extensions.

    ``thinking_budget_tokens`` enables extended thinking; the streamed
    ``thinking_delta`` frames surface as ``StreamChunk.reasoning``.
    """

    thinking_budget_tokens: Optional[int] = Field(default=None, ge=1024)
    metadata_user_id: Optional[str] = None


class GeminiOptions(GenerationOptions):
    """Google Gemini ``generationConfig`` / safety extensions."""

    candidate_count: Optional[int] = Field(default=None, gt=0)
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    response_mime_type: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    seed: Optional[int] = None
    response_logprobs: Optional[bool] = None
    logprobs: Optional[int] = None
    audio_timestamp: Optional[bool] = None
    safety_settings: Optional[List[Dict[str, str]]] = None


__all__ = [
    "ToolChoice",
    "ToolChoiceByName",
    "GenerationOptions",
    "OpenAIChatOptions",
    "OpenAIResponsesOptions",
    "AnthropicOptions",
    "GeminiOptions",
]
