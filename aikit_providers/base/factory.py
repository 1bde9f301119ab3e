"""Provider Factory utilities.

Purpose
-------
Centralize provider-agnostic creation of adapter instances implementing the
``LLMProvider`` (streaming) or ``EmbeddingProvider`` interface. Adapters are
imported lazily using ``importlib`` so that importing the factory never pulls
in every vendor module.

External dependencies
---------------------
- Standard library only (``importlib``).

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
  fallbacks; it either returns an instance or raises a clear error.

Scope
-----
Streaming providers: ``openai`` (Chat Completions), ``openai-responses``,
``anthropic``, ``gemini`` and its alias ``google``.
Embedding providers: ``openai``, ``gemini`` (alias ``google``).
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Mapping, Tuple, Type


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider name is not registered in the factory mapping.
    - The provider module cannot be imported or the adapter class is missing.
    - The adapter constructor rejected its keyword arguments.

    Configuration problems (missing API key) are not wrapped; they surface as
    :class:`ConfigurationError` from the adapter itself.
    """


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Delegate to :meth:`ProviderFactory.create`.

    Parameters
    ----------
    provider:
        Canonical provider identifier (e.g., ``"anthropic"``).
    **kwargs:
        Keyword arguments forwarded to the adapter constructor
        (``api_key``, ``base_url``, ``transport``, ...).
    """
    return ProviderFactory.create(provider, **kwargs)


def create_embedding_provider(provider: str, **kwargs: Any) -> Any:
    """Delegate to :meth:`ProviderFactory.create_embeddings`."""
    return ProviderFactory.create_embeddings(provider, **kwargs)


class ProviderFactory:
    """Create provider adapters based on a canonical name (e.g., ``"openai"``).

    Design notes
    ------------
    - Uses ``importlib.import_module`` for explicit import semantics.
    - Raises :class:`UnknownProviderError` with precise messages for unknown
      providers, import failures, missing classes, and bad constructor
      arguments.
    """

    # Map canonical provider names to import paths and class names
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "aikit_providers.openai.client", "class": "OpenAIProvider"},
        "openai-responses": {"module": "aikit_providers.openai.client", "class": "OpenAIResponsesProvider"},
        "anthropic": {"module": "aikit_providers.anthropic.client", "class": "AnthropicProvider"},
        "gemini": {"module": "aikit_providers.gemini.client", "class": "GeminiProvider"},
    }
    _EMBEDDING_PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "aikit_providers.openai.embeddings", "class": "OpenAIEmbeddingProvider"},
        "gemini": {"module": "aikit_providers.gemini.embeddings", "class": "GeminiEmbeddingProvider"},
    }
    _ALIASES: Dict[str, str] = {
        "google": "gemini",
        "openai_responses": "openai-responses",
    }

    @classmethod
    def resolve_name(cls, provider: str) -> str:
        """Return the canonical name for ``provider`` (aliases resolved)."""
        name = (provider or "").lower().strip()
        return cls._ALIASES.get(name, name)

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> Any:
        """Create a streaming provider adapter instance.

        Raises
        ------
        UnknownProviderError
            If provider is unknown, the adapter module fails to import, the
            adapter class is missing, or the constructor rejects the kwargs.
        ConfigurationError
            Propagated unchanged from the adapter constructor.
        """
        return cls._instantiate(cls._PROVIDERS, cls.supported(), provider, kwargs)

    @classmethod
    def create_embeddings(cls, provider: str, **kwargs: Any) -> Any:
        """Create an embedding adapter instance; errors as in :meth:`create`."""
        return cls._instantiate(cls._EMBEDDING_PROVIDERS, cls.supported_embeddings(), provider, kwargs)

    @classmethod
    def _instantiate(
        cls,
        registry: Mapping[str, Dict[str, str]],
        supported: Tuple[str, ...],
        provider: str,
        kwargs: Dict[str, Any],
    ) -> Any:
        name = cls.resolve_name(provider)
        spec = registry.get(name)
        if not spec:
            raise UnknownProviderError(
                f"Unknown provider '{provider}'; supported: {', '.join(supported)}"
            )

        module_path, class_name = spec["module"], spec["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:  # pragma: no cover - registry drift
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' adapter constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return canonical provider names (aliases included) in deterministic order."""
        return tuple(cls._PROVIDERS.keys()) + tuple(cls._ALIASES.keys())

    @classmethod
    def supported_embeddings(cls) -> Tuple[str, ...]:
        """Return embedding provider names (aliases included)."""
        aliases = tuple(a for a, target in cls._ALIASES.items() if target in cls._EMBEDDING_PROVIDERS)
        return tuple(cls._EMBEDDING_PROVIDERS.keys()) + aliases


__all__ = ["ProviderFactory", "UnknownProviderError", "create_embedding_provider", "create_provider"]
