"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``aikit_providers.base.models_parts``. These types are shared by every
serializer and decoder; nothing in here performs I/O.
"""

from .models_parts.content import Content, ImageContent, TextContent, ToolResultContent
from .models_parts.embedding import EmbeddingResponse, EmbeddingResult
from .models_parts.finish_reason import FinishReason
from .models_parts.message import Message, Role
from .models_parts.stream_chunk import ReasoningDelta, StreamChunk
from .models_parts.tool import Tool
from .models_parts.tool_call import ToolCall
from .models_parts.usage import GenerationUsage

__all__ = [
    "Content",
    "TextContent",
    "ImageContent",
    "ToolResultContent",
    "FinishReason",
    "Message",
    "Role",
    "ReasoningDelta",
    "StreamChunk",
    "Tool",
    "ToolCall",
    "GenerationUsage",
    "EmbeddingResult",
    "EmbeddingResponse",
]
