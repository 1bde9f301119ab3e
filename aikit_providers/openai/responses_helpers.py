"""OpenAI Responses API request helpers.

Purpose:
- Build the ``/responses`` streaming body from normalized messages and
  :class:`OpenAIResponsesOptions`.

Input mapping:
- ``system``/``user`` messages become role items with ``input_text`` /
  ``input_image`` parts; assistant text becomes ``output_text``.
- Assistant tool calls become standalone ``function_call`` items and tool
  results ``function_call_output`` items, both addressed by ``call_id``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..base.dto.generation_options import GenerationOptions, ToolChoice, ToolChoiceByName
from ..base.models import ImageContent, Message, TextContent, Tool
from ..base.utils.messages import group_content, to_image_url
from .chat_helpers import encode_arguments


def _input_parts(message: Message) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextContent):
            parts.append({"type": "input_text", "text": part.text})
        elif isinstance(part, ImageContent):
            parts.append({"type": "input_image", "image_url": to_image_url(part.image)})
    return parts


def map_input_item(message: Message) -> List[Dict[str, Any]]:
    if message.role == "system":
        return [{"role": "system", "content": [{"type": "input_text", "text": message.text_or_joined()}]}]
    if message.role == "user":
        return [{"role": "user", "content": _input_parts(message)}]
    if message.role == "assistant":
        items: List[Dict[str, Any]] = []
        text = message.text_or_joined()
        if text:
            items.append({"role": "assistant", "content": [{"type": "output_text", "text": text}]})
        for call in message.tool_calls or ():
            items.append(
                {
                    "type": "function_call",
                    "call_id": call.id,
                    "name": call.name,
                    "arguments": encode_arguments(call.arguments),
                }
            )
        return items
    if message.role == "tool":
        return [
            {"type": "function_call_output", "call_id": result.tool_call_id, "output": result.result}
            for result in group_content(message.content).tool_results
        ]
    return []


def format_tools(tools: Sequence[Tool]) -> List[Dict[str, Any]]:
    return [
        {
            "type": "function",
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        }
        for tool in tools
    ]


def format_tool_choice(choice: ToolChoice) -> Any:
    if isinstance(choice, ToolChoiceByName):
        return {"type": "function", "name": choice.name}
    return choice


_PASSTHROUGH = (
    "background",
    "include",
    "instructions",
    "metadata",
    "parallel_tool_calls",
    "previous_response_id",
    "service_tier",
    "store",
    "truncation",
    "user",
)


def serialize_responses_request(messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
    """Build the streaming ``/responses`` body."""
    body: Dict[str, Any] = {
        "model": options.model,
        "input": [item for message in messages for item in map_input_item(message)],
        "stream": True,
    }
    for key, value in (
        ("max_output_tokens", options.max_output_tokens),
        ("temperature", options.temperature),
        ("top_p", options.top_p),
    ):
        if value is not None:
            body[key] = value
    for attr in _PASSTHROUGH:
        value = getattr(options, attr, None)
        if value is not None:
            body[attr] = value
    effort = getattr(options, "reasoning_effort", None)
    if effort is not None:
        body["reasoning"] = {"effort": effort}
    text_format = getattr(options, "text_format", None)
    if text_format is not None:
        body["text"] = {"format": text_format}
    if options.tools:
        body["tools"] = format_tools(options.tools)
        if options.tool_choice is not None:
            body["tool_choice"] = format_tool_choice(options.tool_choice)
    return body


__all__ = ["map_input_item", "format_tools", "format_tool_choice", "serialize_responses_request"]
