"""Message content helpers shared by the vendor serializers.

Helpers here are side-effect free and operate on the provider-agnostic
models only: grouping a message's content by variant, image payload
normalization (data URL vs. bare base64), and tool-name lookups needed by
vendors that address tool results by function name instead of call id.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..models import Content, ImageContent, Message, TextContent, ToolResultContent

_DATA_URL_RE = re.compile(r"^data:(?P<mime>image/[^;]+);base64,", re.IGNORECASE)

# Leading base64 characters of common image file signatures.
_BASE64_SIGNATURES = (
    ("iVBORw0KGgo", "image/png"),
    ("R0lGOD", "image/gif"),
    ("UklGR", "image/webp"),
    ("/9j/", "image/jpeg"),
)
_SUPPORTED_MEDIA_TYPES = frozenset({"image/png", "image/gif", "image/webp", "image/jpeg"})
DEFAULT_MEDIA_TYPE = "image/jpeg"


@dataclass
class GroupedContent:
    """A message's content split by variant, preserving relative order."""

    text: List[TextContent] = field(default_factory=list)
    images: List[ImageContent] = field(default_factory=list)
    tool_results: List[ToolResultContent] = field(default_factory=list)

    def joined_text(self, sep: str = "\n") -> str:
        return sep.join(p.text for p in self.text)


def group_content(content: Sequence[Content]) -> GroupedContent:
    grouped = GroupedContent()
    for part in content:
        if isinstance(part, TextContent):
            grouped.text.append(part)
        elif isinstance(part, ImageContent):
            grouped.images.append(part)
        elif isinstance(part, ToolResultContent):
            grouped.tool_results.append(part)
    return grouped


def extract_base64_data(image: str) -> str:
    """Strip a ``data:image/...;base64,`` prefix, returning the raw payload."""
    return _DATA_URL_RE.sub("", image, count=1)


def detect_media_type(image: str) -> str:
    """Return the image MIME type from a data URL or the payload signature.

    Unknown or unsupported types fall back to ``image/jpeg``.
    """
    match = _DATA_URL_RE.match(image)
    if match:
        mime = match.group("mime").lower()
        if mime == "image/jpg":
            mime = "image/jpeg"
        return mime if mime in _SUPPORTED_MEDIA_TYPES else DEFAULT_MEDIA_TYPE
    for prefix, mime in _BASE64_SIGNATURES:
        if image.startswith(prefix):
            return mime
    return DEFAULT_MEDIA_TYPE


def to_image_url(image: str) -> str:
    """Return a URL vendors accept: data/http(s) URLs pass, base64 is wrapped."""
    if image.startswith(("data:", "http://", "https://")):
        return image
    return f"data:{detect_media_type(image)};base64,{image}"


def tool_names_by_id(messages: Sequence[Message]) -> Dict[str, str]:
    """Map every assistant tool-call id in ``messages`` to its tool name."""
    names: Dict[str, str] = {}
    for message in messages:
        if message.role == "assistant" and message.tool_calls:
            for call in message.tool_calls:
                names[call.id] = call.name
    return names


def joined_system_text(messages: Sequence[Message]) -> str:
    """Join the text of every system message with newlines."""
    return "\n".join(m.text_or_joined() for m in messages if m.role == "system" and m.text_or_joined())


__all__ = [
    "DEFAULT_MEDIA_TYPE",
    "GroupedContent",
    "group_content",
    "extract_base64_data",
    "detect_media_type",
    "to_image_url",
    "tool_names_by_id",
    "joined_system_text",
]
