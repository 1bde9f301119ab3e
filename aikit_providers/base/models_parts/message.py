"""
Message DTO used across providers.

Defines the `Message` dataclass and the `Role` literal representing the sender
role. Content is always an ordered list of content parts (possibly empty).
Assistant messages may additionally carry the tool calls the model issued so
that follow-up turns can replay them to the vendor.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from .content import Content, TextContent
from .tool_call import ToolCall


# Message roles used across providers.
Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class Message:
    """A chat message in a vendor-agnostic conversation.

    Attributes:
        role: The role of the message author (``"system"``, ``"user"``,
            ``"assistant"``, or ``"tool"``).
        content: Ordered content parts. Never ``None``; ``None`` is normalized
            to an empty list on construction.
        tool_calls: Tool calls issued by the assistant. Only meaningful on
            ``assistant`` messages; ignored by serializers for other roles.

    The core only reads messages; callers should treat them as immutable once
    passed to ``generate``.
    """

    role: Role
    content: List[Content] = field(default_factory=list)
    tool_calls: Optional[List[ToolCall]] = None

    def __post_init__(self) -> None:
        if self.content is None:
            self.content = []

    def text(self) -> str:
        """Return the first text part, or an empty string when there is none."""
        for part in self.content:
            if isinstance(part, TextContent):
                return part.text
        return ""

    def text_or_joined(self) -> str:
        """Return all text parts joined by newlines (non-text parts skipped)."""
        return "\n".join(p.text for p in self.content if isinstance(p, TextContent))


__all__ = [
    "Message",
    "Role",
]
