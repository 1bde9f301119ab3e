"""aikit_providers package

Unified streaming abstraction over multiple AI model providers.

Purpose:
    Provide a minimal, stable API for external consumption: build a
    vendor-agnostic conversation, pick a provider, and iterate normalized
    ``StreamChunk`` values::

        provider = create("anthropic", api_key="...")
        async for chunk in provider.generate([user_text("Hi")], {"model": "claude-3-5-haiku-latest"}):
            print(chunk.delta, end="")

Public API (re-exported):
    - Version: ``__version__``
    - Models: ``Message``, content parts, ``Tool``, ``ToolCall``,
      ``StreamChunk``, ``FinishReason``, ``GenerationUsage``
    - Options: ``GenerationOptions`` and the per-vendor subclasses
    - Exceptions: :class:`ProviderError` and its subclasses, :class:`ErrorCode`
    - Embeddings: :func:`create_embeddings`, ``EmbeddingOptions``,
      ``EmbeddingResponse``
    - Factory: :func:`create`, ``ProviderFactory``
    - Stream and message helpers
"""

from typing import Any

from .base.dto import (
    AnthropicOptions,
    EmbeddingOptions,
    GeminiEmbeddingOptions,
    GeminiOptions,
    GenerationOptions,
    OpenAIEmbeddingOptions,
    OpenAIChatOptions,
    OpenAIResponsesOptions,
    ProviderConfig,
    ToolChoiceByName,
)
from .base.errors import (
    ConfigurationError,
    ErrorCode,
    ProviderError,
    ProviderStreamError,
    ProviderTimeoutError,
    RequestError,
    ToolArgumentParseError,
)
from .base.embedding import BaseEmbeddingProvider
from .base.factory import ProviderFactory, UnknownProviderError, create_embedding_provider, create_provider
from .base.interfaces import EmbeddingProvider, LLMProvider
from .base.models import (
    EmbeddingResponse,
    EmbeddingResult,
    FinishReason,
    GenerationUsage,
    ImageContent,
    Message,
    ReasoningDelta,
    StreamChunk,
    TextContent,
    Tool,
    ToolCall,
    ToolResultContent,
)
from .base.provider import BaseProvider
from .base.streaming import (
    StreamResult,
    collect_deltas,
    collect_stream,
    filter_stream,
    map_stream,
    process_stream,
)
from .base.utils import (
    assistant_text,
    assistant_with_tool_calls,
    create_tool,
    image_content,
    system_text,
    text_content,
    tool_result,
    tool_result_content,
    user_content,
    user_image,
    user_multiple_images,
    user_text,
)

__version__ = "0.1.0"


def create(provider: str, **kwargs: Any) -> LLMProvider:
    """Create a provider adapter by name (``openai``, ``anthropic``, ...)."""
    return create_provider(provider, **kwargs)


def create_embeddings(provider: str, **kwargs: Any) -> EmbeddingProvider:
    """Create an embedding adapter by name (``openai``, ``gemini``)."""
    return create_embedding_provider(provider, **kwargs)


__all__ = [
    "__version__",
    # Models
    "EmbeddingResponse",
    "EmbeddingResult",
    "FinishReason",
    "GenerationUsage",
    "ImageContent",
    "Message",
    "ReasoningDelta",
    "StreamChunk",
    "TextContent",
    "Tool",
    "ToolCall",
    "ToolResultContent",
    # Options / config
    "AnthropicOptions",
    "EmbeddingOptions",
    "GeminiEmbeddingOptions",
    "GeminiOptions",
    "GenerationOptions",
    "OpenAIChatOptions",
    "OpenAIEmbeddingOptions",
    "OpenAIResponsesOptions",
    "ProviderConfig",
    "ToolChoiceByName",
    # Exceptions
    "ConfigurationError",
    "ErrorCode",
    "ProviderError",
    "ProviderStreamError",
    "ProviderTimeoutError",
    "RequestError",
    "ToolArgumentParseError",
    "UnknownProviderError",
    # Providers
    "BaseEmbeddingProvider",
    "BaseProvider",
    "EmbeddingProvider",
    "LLMProvider",
    "ProviderFactory",
    "create",
    "create_embedding_provider",
    "create_embeddings",
    "create_provider",
    # Stream helpers
    "StreamResult",
    "collect_deltas",
    "collect_stream",
    "filter_stream",
    "map_stream",
    "process_stream",
    # Message helpers
    "assistant_text",
    "assistant_with_tool_calls",
    "create_tool",
    "image_content",
    "system_text",
    "text_content",
    "tool_result",
    "tool_result_content",
    "user_content",
    "user_image",
    "user_multiple_images",
    "user_text",
]
