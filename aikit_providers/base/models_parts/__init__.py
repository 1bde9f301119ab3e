"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
`aikit_providers.base.models_parts` if needed, while `aikit_providers.base.models`
remains the primary stable import path.
"""

from .content import Content, ImageContent, TextContent, ToolResultContent
from .embedding import EmbeddingResponse, EmbeddingResult
from .finish_reason import FinishReason
from .message import Message, Role
from .stream_chunk import ReasoningDelta, StreamChunk
from .tool import Tool
from .tool_call import ToolCall
from .usage import GenerationUsage

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
