"""Gemini request helpers.

Purpose:
- Build the ``streamGenerateContent`` body from normalized messages and
  :class:`GeminiOptions`.

Mapping notes:
- Roles: ``user`` -> ``user``, ``assistant`` -> ``model``, tool results ->
  ``function`` contents carrying ``functionResponse`` parts.
- Gemini addresses tool results by function name. The name is looked up from
  the assistant tool call with the same id earlier in the conversation, and
  falls back to the id itself.
- Text parts of one message are joined with newlines into a single part.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..base.dto.generation_options import GenerationOptions, ToolChoice, ToolChoiceByName
from ..base.models import Message, Tool
from ..base.utils.messages import (
    detect_media_type,
    extract_base64_data,
    group_content,
    joined_system_text,
    tool_names_by_id,
)


def image_part(image: str) -> Dict[str, Any]:
    if image.startswith(("http://", "https://")):
        return {"fileData": {"mimeType": detect_media_type(image), "fileUri": image}}
    return {"inlineData": {"mimeType": detect_media_type(image), "data": extract_base64_data(image)}}


def map_content(message: Message, names: Mapping[str, str]) -> Optional[Dict[str, Any]]:
    grouped = group_content(message.content)
    if message.role == "tool":
        if not grouped.tool_results:
            return None
        return {
            "role": "function",
            "parts": [
                {
                    "functionResponse": {
                        "name": names.get(r.tool_call_id, r.tool_call_id),
                        "response": {"result": r.result},
                    }
                }
                for r in grouped.tool_results
            ],
        }
    if message.role not in ("user", "assistant"):
        return None
    parts: List[Dict[str, Any]] = []
    text = grouped.joined_text()
    if text.strip():
        parts.append({"text": text})
    parts.extend(image_part(img.image) for img in grouped.images)
    if message.role == "assistant":
        for call in message.tool_calls or ():
            parts.append({"functionCall": {"name": call.name, "args": dict(call.arguments)}})
    if not parts:
        return None
    return {"role": "model" if message.role == "assistant" else "user", "parts": parts}


# Option attribute -> generationConfig key.
_GENERATION_CONFIG = (
    ("temperature", "temperature"),
    ("top_p", "topP"),
    ("top_k", "topK"),
    ("max_output_tokens", "maxOutputTokens"),
    ("stop_sequences", "stopSequences"),
    ("candidate_count", "candidateCount"),
    ("presence_penalty", "presencePenalty"),
    ("frequency_penalty", "frequencyPenalty"),
    ("response_mime_type", "responseMimeType"),
    ("response_schema", "responseSchema"),
    ("seed", "seed"),
    ("response_logprobs", "responseLogprobs"),
    ("logprobs", "logprobs"),
    ("audio_timestamp", "audioTimestamp"),
)


def generation_config(options: GenerationOptions) -> Dict[str, Any]:
    config: Dict[str, Any] = {}
    for attr, key in _GENERATION_CONFIG:
        value = getattr(options, attr, None)
        if value is not None:
            config[key] = value
    return config


def format_tools(tools: Sequence[Tool]) -> List[Dict[str, Any]]:
    return [
        {
            "functionDeclarations": [
                {"name": t.name, "description": t.description, "parameters": t.parameters} for t in tools
            ]
        }
    ]


_CALLING_MODES = {"auto": "AUTO", "required": "ANY", "none": "NONE"}


def format_tool_choice(choice: ToolChoice) -> Dict[str, Any]:
    if isinstance(choice, ToolChoiceByName):
        return {"functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": [choice.name]}}
    return {"functionCallingConfig": {"mode": _CALLING_MODES[choice]}}


def serialize_generate_request(messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
    """Build the ``streamGenerateContent`` body (the model travels in the URL)."""
    names = tool_names_by_id(messages)
    body: Dict[str, Any] = {
        "contents": [c for m in messages if (c := map_content(m, names)) is not None],
    }
    system = joined_system_text(messages)
    if system:
        body["systemInstruction"] = {"parts": [{"text": system}]}
    config = generation_config(options)
    if config:
        body["generationConfig"] = config
    safety = getattr(options, "safety_settings", None)
    if safety is not None:
        body["safetySettings"] = safety
    if options.tools:
        body["tools"] = format_tools(options.tools)
        if options.tool_choice is not None:
            body["toolConfig"] = format_tool_choice(options.tool_choice)
    return body


__all__ = [
    "image_part",
    "map_content",
    "generation_config",
    "format_tools",
    "format_tool_choice",
    "serialize_generate_request",
]
