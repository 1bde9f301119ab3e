"""Message construction and content inspection helpers."""

from .message_helpers import (
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
from .messages import (
    GroupedContent,
    detect_media_type,
    extract_base64_data,
    group_content,
    to_image_url,
    tool_names_by_id,
)

__all__ = [
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
    "GroupedContent",
    "detect_media_type",
    "extract_base64_data",
    "group_content",
    "to_image_url",
    "tool_names_by_id",
]
