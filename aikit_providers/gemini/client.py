"""GeminiProvider adapter.

Streams ``POST {base_url}/models/{model}:streamGenerateContent?alt=sse``
through :class:`BaseProvider`. The API key travels in the
``x-goog-api-key`` header so it never appears in URLs or request logs.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from ..base.dto.generation_options import GeminiOptions, GenerationOptions
from ..base.models import Message
from ..base.provider import BaseProvider
from ..base.streaming.decoder import StreamDecoder
from ..config.defaults import GEMINI_DEFAULT_BASE_URL
from .helpers import serialize_generate_request
from .stream_helpers import GeminiStreamDecoder

__all__ = ["GeminiProvider"]


class GeminiProvider(BaseProvider):
    """Adapter for the Google Gemini streaming API."""

    provider_name = "gemini"
    options_model = GeminiOptions
    default_base_url = GEMINI_DEFAULT_BASE_URL

    def build_url(self, options: GenerationOptions) -> str:
        model = options.model
        if model.startswith("models/"):
            model = model[len("models/"):]
        return f"{self.base_url}/models/{model}:streamGenerateContent?alt=sse"

    def build_headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self.config.api_key}

    def serialize(self, messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:
        return serialize_generate_request(messages, options)

    def create_decoder(self, model: str) -> StreamDecoder:
        return GeminiStreamDecoder(model=model, logger=self._logger)
