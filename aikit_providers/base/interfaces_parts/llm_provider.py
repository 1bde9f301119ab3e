"""LLMProvider Protocol (single-class module).

Defines the minimal streaming interface contract for provider adapters.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from ..dto.generation_options import GenerationOptions
from ..models import Message, StreamChunk


@runtime_checkable
class LLMProvider(Protocol):
    """Minimal interface for Large Language Model providers.

    Implementations map the vendor-agnostic messages and options to their
    wire format, decode the vendor stream into ``StreamChunk`` values, and
    never leak vendor payloads upstream.
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g., ``"openai"`` or ``"anthropic"``."""
        ...

    def generate(
        self,
        messages: Sequence[Message],
        options: Optional[Union[GenerationOptions, Mapping[str, Any]]] = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream one generation as normalized chunks.

        Failure handling: errors are raised from the iterator
        (``ConfigurationError`` and ``RequestError`` before the first chunk,
        ``ProviderStreamError`` / ``ToolArgumentParseError`` /
        ``ProviderTimeoutError`` at any point).
        """
        ...
