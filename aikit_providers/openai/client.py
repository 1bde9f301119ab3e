"""OpenAI provider adapters built on :class:`BaseProvider`.

Two adapters share credentials and headers:

- :class:`OpenAIProvider` streams ``/chat/completions``;
- :class:`OpenAIResponsesProvider` streams ``/responses``.

Both authenticate with ``Authorization: Bearer <key>`` and forward the
optional ``OpenAI-Organization`` / ``OpenAI-Project`` headers. Timeout, retry
and logging semantics are inherited from the base class.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from ..base.dto.generation_options import GenerationOptions, OpenAIChatOptions, OpenAIResponsesOptions
from ..base.models import Message
from ..base.provider import BaseProvider
from ..base.streaming.decoder import StreamDecoder
from ..config.defaults import OPENAI_DEFAULT_BASE_URL
from .chat_helpers import serialize_chat_request
from .chat_stream import OpenAIChatStreamDecoder
from .responses_helpers import serialize_responses_request
from .responses_stream import OpenAIResponsesStreamDecoder

__all__ = ["OpenAIProvider", "OpenAIResponsesProvider"]


class _OpenAIHeadersMixin:
    config: Any

    def build_headers(self) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        if self.config.organization:
            headers["OpenAI-Organization"] = self.config.organization
        if self.config.project:
            headers["OpenAI-Project"] = self.config.project
        return headers


class OpenAIProvider(_OpenAIHeadersMixin, BaseProvider):
    """OpenAI Chat Completions adapter."""

    provider_name = "openai"
    options_model = OpenAIChatOptions
    default_base_url = OPENAI_DEFAULT_BASE_URL

    def build_url(self, options: GenerationOptions) -> str:
        return f"{self.base_url}/chat/completions"

    def serialize(self, messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
        return serialize_chat_request(messages, options)

    def create_decoder(self, model: str) -> StreamDecoder:
        return OpenAIChatStreamDecoder(model=model, logger=self._logger)


class OpenAIResponsesProvider(_OpenAIHeadersMixin, BaseProvider):
    """OpenAI Responses API adapter (reasoning summaries, ``previous_response_id``)."""

    provider_name = "openai-responses"
    options_model = OpenAIResponsesOptions
    default_base_url = OPENAI_DEFAULT_BASE_URL

    def build_url(self, options: GenerationOptions) -> str:
        return f"{self.base_url}/responses"

    def serialize(self, messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
        return serialize_responses_request(messages, options)

    def create_decoder(self, model: str) -> StreamDecoder:
        return OpenAIResponsesStreamDecoder(model=model, logger=self._logger)
