"""Interfaces (Protocols) split into single-class modules.

This package provides one Protocol per file while allowing
``aikit_providers.base.interfaces`` to re-export a stable API.
"""

from .embedding_provider import EmbeddingProvider
from .llm_provider import LLMProvider

__all__ = ["EmbeddingProvider", "LLMProvider"]
