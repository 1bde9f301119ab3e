"""
OpenAI provider package.

Exports:
- OpenAIProvider: Chat Completions streaming adapter
- OpenAIResponsesProvider: Responses API streaming adapter
- OpenAIEmbeddingProvider: ``/embeddings`` adapter
"""

from .client import OpenAIProvider, OpenAIResponsesProvider
from .embeddings import OpenAIEmbeddingProvider

__all__ = ["OpenAIProvider", "OpenAIResponsesProvider", "OpenAIEmbeddingProvider"]
