"""OpenAI ``/embeddings`` adapter.

Request body: ``{"model", "input": [...], "dimensions"?, "encoding_format"?,
"user"?}``. Response items carry their own ``index``; vectors are returned
in input order. With ``encoding_format="base64"`` each vector arrives as
little-endian float32 bytes and is decoded here.
"""

from __future__ import annotations

import base64
import struct
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..base.dto.embedding_options import EmbeddingOptions, OpenAIEmbeddingOptions
from ..base.embedding import BaseEmbeddingProvider
from ..base.models import GenerationUsage
from ..config.defaults import OPENAI_DEFAULT_BASE_URL
from .client import _OpenAIHeadersMixin

__all__ = [
    "OpenAIEmbeddingProvider",
    "decode_base64_vector",
    "serialize_embeddings_request",
]


def serialize_embeddings_request(texts: Sequence[str], options: EmbeddingOptions) -> Dict[str, Any]:
    body: Dict[str, Any] = {"model": options.model, "input": list(texts)}
    if options.dimensions is not None:
        body["dimensions"] = options.dimensions
    encoding_format = getattr(options, "encoding_format", None)
    if encoding_format:
        body["encoding_format"] = encoding_format
    user = getattr(options, "user", None)
    if user:
        body["user"] = user
    return body


def decode_base64_vector(data: str) -> List[float]:
    """Decode a base64 string of little-endian float32 values."""
    raw = base64.b64decode(data)
    return list(struct.unpack(f"<{len(raw) // 4}f", raw))


class OpenAIEmbeddingProvider(_OpenAIHeadersMixin, BaseEmbeddingProvider):
    """OpenAI embeddings (``text-embedding-3-small``, ``-large``, ...)."""

    provider_name = "openai"
    options_model = OpenAIEmbeddingOptions
    default_base_url = OPENAI_DEFAULT_BASE_URL
    max_batch_size = 2048

    def build_url(self, options: EmbeddingOptions) -> str:
        return f"{self.base_url}/embeddings"

    def serialize(self, texts: Sequence[str], options: EmbeddingOptions) -> Dict[str, Any]:
        return serialize_embeddings_request(texts, options)

    def parse_response(
        self,
        payload: Dict[str, Any],
        options: EmbeddingOptions,
        count: int,
    ) -> Tuple[List[List[float]], Optional[GenerationUsage], Optional[str]]:
        data = payload.get("data")
        if not isinstance(data, list) or len(data) != count:
            raise self.payload_error(f"expected {count} embeddings in 'data'", options.model)
        ordered = sorted(data, key=lambda item: item.get("index", 0))
        vectors = []
        for item in ordered:
            values = item.get("embedding")
            if isinstance(values, str):
                values = decode_base64_vector(values)
            if not isinstance(values, list):
                raise self.payload_error("embedding item without a vector", options.model)
            vectors.append([float(v) for v in values])
        usage = payload.get("usage") or None
        parsed_usage = (
            GenerationUsage(input_tokens=usage.get("prompt_tokens"), total_tokens=usage.get("total_tokens"))
            if usage
            else None
        )
        return vectors, parsed_usage, payload.get("model")
