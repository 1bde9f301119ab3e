"""OpenAI Chat Completions request helpers.

Purpose:
- Provide side-effect-free builders that turn normalized messages and
  :class:`OpenAIChatOptions` into the ``/chat/completions`` streaming body,
  keeping ``client.py`` limited to wiring.

Conventions:
- Only options that are set are written; no vendor defaults are invented.
- Tool call arguments are re-encoded as compact JSON strings, the format the
  API expects when replaying assistant turns.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.dto.generation_options import GenerationOptions, ToolChoice, ToolChoiceByName
from ..base.models import ImageContent, Message, TextContent, Tool, ToolCall
from ..base.utils.messages import group_content, to_image_url


def encode_arguments(arguments: Dict[str, Any]) -> str:
    return json.dumps(arguments, ensure_ascii=False, separators=(",", ":"))


def format_tool_calls(tool_calls: Sequence[ToolCall]) -> List[Dict[str, Any]]:
    return [
        {
            "id": call.id,
            "type": "function",
            "function": {"name": call.name, "arguments": encode_arguments(call.arguments)},
        }
        for call in tool_calls
    ]


def _user_parts(message: Message) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    for part in message.content:
        if isinstance(part, TextContent):
            parts.append({"type": "text", "text": part.text})
        elif isinstance(part, ImageContent):
            parts.append({"type": "image_url", "image_url": {"url": to_image_url(part.image)}})
    return parts


def map_message(message: Message) -> List[Dict[str, Any]]:
    """Map one message to zero or more Chat Completions messages.

    A ``tool`` message expands to one ``role: tool`` entry per result.
    """
    if message.role == "system":
        return [{"role": "system", "content": message.text_or_joined()}]
    if message.role == "user":
        return [{"role": "user", "content": _user_parts(message)}]
    if message.role == "assistant":
        text = message.text_or_joined()
        out: Dict[str, Any] = {"role": "assistant", "content": text or None}
        if message.tool_calls:
            out["tool_calls"] = format_tool_calls(message.tool_calls)
        elif not text:
            out["content"] = ""
        return [out]
    if message.role == "tool":
        return [
            {"role": "tool", "tool_call_id": result.tool_call_id, "content": result.result}
            for result in group_content(message.content).tool_results
        ]
    return []


def format_tools(tools: Sequence[Tool]) -> List[Dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }
        for tool in tools
    ]


def format_tool_choice(choice: ToolChoice) -> Any:
    if isinstance(choice, ToolChoiceByName):
        return {"type": "function", "function": {"name": choice.name}}
    return choice


# Option attribute -> body key, copied verbatim when set.
_PASSTHROUGH = (
    ("presence_penalty", "presence_penalty"),
    ("frequency_penalty", "frequency_penalty"),
    ("user", "user"),
    ("logprobs", "logprobs"),
    ("top_logprobs", "top_logprobs"),
    ("seed", "seed"),
    ("response_format", "response_format"),
    ("logit_bias", "logit_bias"),
    ("n", "n"),
    ("modalities", "modalities"),
    ("audio", "audio"),
    ("max_completion_tokens", "max_completion_tokens"),
    ("prediction", "prediction"),
    ("web_search_options", "web_search_options"),
    ("reasoning_effort", "reasoning_effort"),
)


def _set(body: Dict[str, Any], key: str, value: Optional[Any]) -> None:
    if value is not None:
        body[key] = value


def serialize_chat_request(messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
    """Build the streaming ``/chat/completions`` body.

    ``options`` may be any :class:`GenerationOptions`; vendor extensions are
    read only when present on the instance.
    """
    body: Dict[str, Any] = {
        "model": options.model,
        "messages": [entry for message in messages for entry in map_message(message)],
        "stream": True,
    }
    _set(body, "max_tokens", options.max_output_tokens)
    _set(body, "temperature", options.temperature)
    _set(body, "top_p", options.top_p)
    _set(body, "stop", options.stop_sequences)
    for attr, key in _PASSTHROUGH:
        _set(body, key, getattr(options, attr, None))
    include_usage = getattr(options, "include_usage", None)
    if include_usage is not None:
        body["stream_options"] = {"include_usage": include_usage}
    if options.tools:
        body["tools"] = format_tools(options.tools)
        if options.tool_choice is not None:
            body["tool_choice"] = format_tool_choice(options.tool_choice)
        _set(body, "parallel_tool_calls", getattr(options, "parallel_tool_calls", None))
    return body


__all__ = [
    "encode_arguments",
    "format_tool_calls",
    "map_message",
    "format_tools",
    "format_tool_choice",
    "serialize_chat_request",
]
