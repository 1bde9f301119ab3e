"""DTO validation package for providers."""

from .generation_options import (
    AnthropicOptions,
    GeminiOptions,
    GenerationOptions,
    OpenAIChatOptions,
    OpenAIResponsesOptions,
    ToolChoice,
    ToolChoiceByName,
)
from .embedding_options import EmbeddingOptions, GeminiEmbeddingOptions, OpenAIEmbeddingOptions
from .provider_config import ProviderConfig

__all__ = [
    "ToolChoice",
    "ToolChoiceByName",
    "GenerationOptions",
    "OpenAIChatOptions",
    "OpenAIResponsesOptions",
    "AnthropicOptions",
    "GeminiOptions",
    "ProviderConfig",
    "EmbeddingOptions",
    "OpenAIEmbeddingOptions",
    "GeminiEmbeddingOptions",
]
