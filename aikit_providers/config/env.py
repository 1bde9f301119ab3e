"""aikit_providers.config.env
==========================

Centralized environment variable mapping for provider credentials.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Providers that accept several
  variable names (Gemini) list them in ``ENV_ALIASES`` with the canonical
  name first to establish precedence.
- The OpenAI Responses adapter shares the OpenAI credentials.

Failure Modes
-------------
Helpers return ``None`` when a provider is unknown or no value is present;
they never raise. Whether a missing key is fatal is decided by the provider
facade (``ConfigurationError`` at construction).
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "openai-responses": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

# Provider -> prefix used for <PREFIX>_BASE_URL / <PREFIX>_MODEL lookups
ENV_PREFIX: Dict[str, str] = {
    "openai": "OPENAI",
    "openai-responses": "OPENAI",
    "anthropic": "ANTHROPIC",
    "gemini": "GEMINI",
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. Case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical API key variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable API key variable names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty candidate, or
        ``(None, None)`` when nothing is set.
    """
    for name in get_env_var_candidates(provider):
        if val := os.environ.get(name):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "ENV_PREFIX",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
