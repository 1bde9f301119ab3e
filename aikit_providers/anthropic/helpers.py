"""Anthropic helpers module.

Purpose:
- Provide reusable, side-effect-free utilities for the Anthropic provider:
  message/content block mapping, tool formatting and the Messages API request
  body. ``client.py`` only wires these into :class:`BaseProvider`.

Conventions:
- System messages are lifted into the top-level ``system`` string.
- Tool results travel as ``tool_result`` blocks inside a ``user`` message.
- ``max_tokens`` is mandatory for the Messages API; when the caller leaves
  ``max_output_tokens`` unset, ``ANTHROPIC_DEFAULT_MAX_TOKENS`` is sent.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..base.dto.generation_options import GenerationOptions, ToolChoice, ToolChoiceByName
from ..base.models import ImageContent, Message, TextContent, Tool
from ..base.utils.messages import (
    detect_media_type,
    extract_base64_data,
    group_content,
    joined_system_text,
)
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS


def image_block(image: str) -> Dict[str, Any]:
    """Map an image to an ``image`` block (remote URL or inline base64)."""
    if image.startswith(("http://", "https://")):
        return {"type": "image", "source": {"type": "url", "url": image}}
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": detect_media_type(image),
            "data": extract_base64_data(image),
        },
    }


def content_blocks(message: Message) -> List[Dict[str, Any]]:
    """Build the content blocks of a user or assistant message.

    Whitespace-only text parts are dropped; the API rejects empty text blocks.
    """
    blocks: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextContent):
            if part.text.strip():
                blocks.append({"type": "text", "text": part.text})
        elif isinstance(part, ImageContent):
            blocks.append(image_block(part.image))
    if message.role == "assistant":
        for call in message.tool_calls or ():
            blocks.append({"type": "tool_use", "id": call.id, "name": call.name, "input": dict(call.arguments)})
    return blocks


def map_message(message: Message) -> List[Dict[str, Any]]:
    if message.role == "tool":
        results = group_content(message.content).tool_results
        if not results:
            return []
        return [
            {
                "role": "user",
                "content": [
                    {"type": "tool_result", "tool_use_id": r.tool_call_id, "content": r.result}
                    for r in results
                ],
            }
        ]
    if message.role in ("user", "assistant"):
        blocks = content_blocks(message)
        return [{"role": message.role, "content": blocks}] if blocks else []
    return []


def format_tools(tools: Sequence[Tool]) -> List[Dict[str, Any]]:
    return [
        {"name": tool.name, "description": tool.description, "input_schema": tool.parameters}
        for tool in tools
    ]


_TOOL_CHOICE_TYPES = {"auto": "auto", "required": "any", "none": "none"}


def format_tool_choice(choice: ToolChoice) -> Dict[str, Any]:
    if isinstance(choice, ToolChoiceByName):
        return {"type": "tool", "name": choice.name}
    return {"type": _TOOL_CHOICE_TYPES[choice]}


def serialize_messages_request(messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
    """Build the streaming ``/v1/messages`` body."""
    body: Dict[str, Any] = {
        "model": options.model,
        "messages": [entry for message in messages if message.role != "system" for entry in map_message(message)],
        "max_tokens": options.max_output_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
        "stream": True,
    }
    system = joined_system_text(messages)
    if system:
        body["system"] = system
    for key, value in (
        ("temperature", options.temperature),
        ("top_p", options.top_p),
        ("top_k", options.top_k),
        ("stop_sequences", options.stop_sequences),
    ):
        if value is not None:
            body[key] = value
    budget = getattr(options, "thinking_budget_tokens", None)
    if budget is not None:
        body["thinking"] = {"type": "enabled", "budget_tokens": budget}
    user_id = getattr(options, "metadata_user_id", None)
    if user_id is not None:
        body["metadata"] = {"user_id": user_id}
    if options.tools:
        body["tools"] = format_tools(options.tools)
        if options.tool_choice is not None:
            body["tool_choice"] = format_tool_choice(options.tool_choice)
    return body


__all__ = [
    "image_block",
    "content_blocks",
    "map_message",
    "format_tools",
    "format_tool_choice",
    "serialize_messages_request",
]
