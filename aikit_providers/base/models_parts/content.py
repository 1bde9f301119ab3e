"""
Message content variants.

A message carries an ordered list of content parts. Three variants exist,
each a small frozen dataclass with a literal ``type`` discriminator so
serializers can branch with a plain attribute check:

- :class:`TextContent` - plain text.
- :class:`ImageContent` - a base64 payload or ``data:`` URL, passed through
  opaquely to the vendor-specific image encoding.
- :class:`ToolResultContent` - the output of a tool call, referencing the
  ``ToolCall.id`` it answers. Referential integrity is the caller's concern.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True)
class TextContent:
    """Plain text content part."""

    text: str
    type: Literal["text"] = field(default="text", init=False)


@dataclass(frozen=True)
class ImageContent:
    """Image content part (base64 payload or ``data:image/...;base64,`` URL)."""

    image: str
    type: Literal["image"] = field(default="image", init=False)


@dataclass(frozen=True)
class ToolResultContent:
    """Result returned by a tool, answering an earlier ``ToolCall``.

    Attributes:
        tool_call_id: Identifier of the tool call this result answers.
        result: Tool output, already serialized to a string by the caller.
    """

    tool_call_id: str
    result: str
    type: Literal["tool_result"] = field(default="tool_result", init=False)


Content = Union[TextContent, ImageContent, ToolResultContent]


__all__ = ["TextContent", "ImageContent", "ToolResultContent", "Content"]
