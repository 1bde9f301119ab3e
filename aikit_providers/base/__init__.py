"""
Providers Base Package

Exports the provider-agnostic contracts shared by every vendor adapter:

- Models (DTOs): messages, content parts, tools, stream chunks
- Options: pydantic generation options and provider configuration
- Interfaces: the ``LLMProvider`` streaming boundary and ``EmbeddingProvider``
- Facade: ``BaseProvider`` binding config, transport, serializer and decoder
- Embeddings: ``BaseEmbeddingProvider`` batching texts into JSON requests
- Factory: lazy creation of provider adapters by canonical name
"""

from .dto import EmbeddingOptions, GenerationOptions, ProviderConfig
from .embedding import BaseEmbeddingProvider
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import EmbeddingProvider, LLMProvider
from .models import (
    Content,
    EmbeddingResponse,
    EmbeddingResult,
    FinishReason,
    GenerationUsage,
    ImageContent,
    Message,
    ReasoningDelta,
    Role,
    StreamChunk,
    TextContent,
    Tool,
    ToolCall,
    ToolResultContent,
)
from .provider import BaseProvider
from .streaming import StreamDecoder, StreamMetrics, StreamState
from .timeouts import Deadline, TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "Role",
    "Content",
    "TextContent",
    "ImageContent",
    "ToolResultContent",
    "Message",
    "Tool",
    "ToolCall",
    "FinishReason",
    "GenerationUsage",
    "ReasoningDelta",
    "StreamChunk",
    "EmbeddingResult",
    "EmbeddingResponse",
    # Options
    "GenerationOptions",
    "EmbeddingOptions",
    "ProviderConfig",
    # Interfaces & facade
    "LLMProvider",
    "BaseProvider",
    "EmbeddingProvider",
    "BaseEmbeddingProvider",
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
    "Deadline",
    # Streaming
    "StreamDecoder",
    "StreamState",
    "StreamMetrics",
]
