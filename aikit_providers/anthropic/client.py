"""AnthropicProvider adapter.

Streams the Messages API (``POST {base_url}/v1/messages`` with
``stream: true``) through :class:`BaseProvider`.

Key behaviors:
* Authentication via ``x-api-key``; the API version is pinned with
  ``anthropic-version`` and beta features are opted into through
  ``anthropic-beta`` (``config.beta`` joined with commas).
* Extended thinking (``thinking_budget_tokens``) surfaces as
  ``StreamChunk.reasoning``.
* Usage is reported piecemeal (input tokens in ``message_start``, output
  tokens in ``message_delta``) and merged onto the terminal chunk.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from ..base.dto.generation_options import AnthropicOptions, GenerationOptions
from ..base.models import Message
from ..base.provider import BaseProvider
from ..base.streaming.decoder import StreamDecoder
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_BASE_URL
from .helpers import serialize_messages_request
from .stream_helpers import AnthropicStreamDecoder

__all__ = ["AnthropicProvider"]


class AnthropicProvider(BaseProvider):
    """Adapter for the Anthropic Messages streaming API."""

    provider_name = "anthropic"
    options_model = AnthropicOptions
    default_base_url = ANTHROPIC_DEFAULT_BASE_URL

    def build_url(self, options: GenerationOptions) -> str:
        return f"{self.base_url}/v1/messages"

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
        }
        if self.config.beta:
            headers["anthropic-beta"] = ",".join(self.config.beta)
        return headers

    def serialize(self, messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
        return serialize_messages_request(messages, options)

    def create_decoder(self, model: str) -> StreamDecoder:
        return AnthropicStreamDecoder(model=model, logger=self._logger)
