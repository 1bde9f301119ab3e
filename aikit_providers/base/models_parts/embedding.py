"""Embedding vectors returned by the embedding adapters."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .usage import GenerationUsage


@dataclass(frozen=True)
class EmbeddingResult:
    """One vector; ``index`` is the position of its text in the request."""

    values: List[float]
    index: int


@dataclass(frozen=True)
class EmbeddingResponse:
    """Vectors for every input text, ordered by ``index``."""

    embeddings: List[EmbeddingResult] = field(default_factory=list)
    model: str = ""
    usage: Optional[GenerationUsage] = None

    @property
    def vectors(self) -> List[List[float]]:
        return [e.values for e in self.embeddings]


__all__ = ["EmbeddingResult", "EmbeddingResponse"]
