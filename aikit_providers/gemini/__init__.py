"""Gemini provider package."""

from .client import GeminiProvider
from .embeddings import GeminiEmbeddingProvider

__all__ = ["GeminiProvider", "GeminiEmbeddingProvider"]
