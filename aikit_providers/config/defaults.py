"""aikit_providers.config.defaults
===============================

Central place for small, stable default values used across the package.
Every value here can be overridden through the layered configuration in
``aikit_providers.config`` (config file, environment, explicit overrides).
"""
from __future__ import annotations

OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

ANTHROPIC_API_VERSION = "2023-06-01"
# Anthropic requires max_tokens on every request.
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024

DEFAULT_MAX_RETRIES = 0

__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "DEFAULT_MAX_RETRIES",
]
