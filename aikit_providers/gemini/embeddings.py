"""Gemini ``batchEmbedContents`` adapter.

``POST {base_url}/models/{model}:batchEmbedContents`` with one request per
text; the response lists ``embeddings[i].values`` in request order. The API
key travels in the ``x-goog-api-key`` header.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..base.dto.embedding_options import EmbeddingOptions, GeminiEmbeddingOptions
from ..base.embedding import BaseEmbeddingProvider
from ..base.models import GenerationUsage
from ..config.defaults import GEMINI_DEFAULT_BASE_URL

__all__ = ["GeminiEmbeddingProvider"]


def _bare_model(model: str) -> str:
    return model[len("models/"):] if model.startswith("models/") else model


class GeminiEmbeddingProvider(BaseEmbeddingProvider):
    """Gemini embeddings (``text-embedding-004``, ``gemini-embedding-001``, ...)."""

    provider_name = "gemini"
    options_model = GeminiEmbeddingOptions
    default_base_url = GEMINI_DEFAULT_BASE_URL
    max_batch_size = 100

    def build_url(self, options: EmbeddingOptions) -> str:
        return f"{self.base_url}/models/{_bare_model(options.model)}:batchEmbedContents"

    def build_headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self.config.api_key}

    def serialize(self, texts: Sequence[str], options: EmbeddingOptions) -> Dict[str, Any]:
        model = f"models/{_bare_model(options.model)}"
        task_type = getattr(options, "task_type", None)
        title = getattr(options, "title", None)
        requests = []
        for text in texts:
            item: Dict[str, Any] = {"model": model, "content": {"parts": [{"text": text}]}}
            if task_type:
                item["taskType"] = task_type
            if title:
                item["title"] = title
            if options.dimensions is not None:
                item["outputDimensionality"] = options.dimensions
            requests.append(item)
        return {"requests": requests}

    def parse_response(
        self,
        payload: Dict[str, Any],
        options: EmbeddingOptions,
        count: int,
    ) -> Tuple[List[List[float]], Optional[GenerationUsage], Optional[str]]:
        embeddings = payload.get("embeddings")
        if not isinstance(embeddings, list) or len(embeddings) != count:
            raise self.payload_error(f"expected {count} embeddings", options.model)
        vectors = []
        for item in embeddings:
            values = (item or {}).get("values")
            if not isinstance(values, list):
                raise self.payload_error("embedding item without values", options.model)
            vectors.append([float(v) for v in values])
        # batchEmbedContents reports no token usage
        return vectors, None, None
