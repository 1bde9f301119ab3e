"""Shorthand constructors for messages, content parts and tools.

These keep call sites terse::

    messages = [system_text("Be brief."), user_text("Hi")]
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..models import (
    Content,
    ImageContent,
    Message,
    TextContent,
    Tool,
    ToolCall,
    ToolResultContent,
)


def user_text(text: str) -> Message:
    return Message(role="user", content=[TextContent(text)])


def system_text(text: str) -> Message:
    return Message(role="system", content=[TextContent(text)])


def assistant_text(text: str) -> Message:
    return Message(role="assistant", content=[TextContent(text)])


def user_image(text: str, image: str) -> Message:
    """User message with a caption followed by one image (URL, data URL or base64)."""
    return Message(role="user", content=[TextContent(text), ImageContent(image)])


def user_multiple_images(text: str, images: Sequence[str]) -> Message:
    return Message(role="user", content=[TextContent(text), *(ImageContent(i) for i in images)])


def user_content(content: Sequence[Content]) -> Message:
    return Message(role="user", content=list(content))


def assistant_with_tool_calls(text: str, tool_calls: Sequence[ToolCall]) -> Message:
    """Replay an assistant turn that issued tool calls.

    An empty ``text`` produces no text part, so vendors that reject empty
    text blocks receive only the calls.
    """
    content: List[Content] = [TextContent(text)] if text else []
    return Message(role="assistant", content=content, tool_calls=list(tool_calls))


def tool_result(tool_call_id: str, result: str) -> Message:
    return Message(role="tool", content=[ToolResultContent(tool_call_id, result)])


def text_content(text: str) -> TextContent:
    return TextContent(text)


def image_content(image: str) -> ImageContent:
    return ImageContent(image)


def tool_result_content(tool_call_id: str, result: str) -> ToolResultContent:
    return ToolResultContent(tool_call_id, result)


def create_tool(name: str, description: str = "", parameters: Optional[Mapping[str, Any]] = None) -> Tool:
    params: Dict[str, Any] = dict(parameters) if parameters else {"type": "object", "properties": {}}
    return Tool(name=name, description=description, parameters=params)


__all__ = [
    "user_text",
    "system_text",
    "assistant_text",
    "user_image",
    "user_multiple_images",
    "user_content",
    "assistant_with_tool_calls",
    "tool_result",
    "text_content",
    "image_content",
    "tool_result_content",
    "create_tool",
]
