"""EmbeddingProvider Protocol (single-class module).

Defines the request/response contract for embedding adapters.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from ..dto.embedding_options import EmbeddingOptions
from ..models import EmbeddingResponse


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Minimal interface for text embedding providers."""

    @property
    def provider_name(self) -> str:
        ...

    async def embed(
        self,
        texts: Sequence[str],
        options: Optional[Union[EmbeddingOptions, Mapping[str, Any]]] = None,
    ) -> EmbeddingResponse:
        """Return one vector per text, in input order.

        ``ConfigurationError`` is raised before any I/O for empty input or a
        missing model.
        """
        ...
