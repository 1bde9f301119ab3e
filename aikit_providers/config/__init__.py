"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (base URLs, retry counts).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by AIKIT_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_API_KEY, ANTHROPIC_BASE_URL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.

Environment Variable Conventions
--------------------------------
API keys resolve through ``config.env`` (canonical name first, then aliases).
Other fields use ``<PREFIX>_<FIELD>``: ``OPENAI_BASE_URL``, ``GEMINI_MODEL``,
``ANTHROPIC_TIMEOUT``, ``ANTHROPIC_MAX_RETRIES``. A ``<PREFIX>_MODEL`` value
becomes the provider's default ``model`` option.

External Config File
--------------------
If AIKIT_CONFIG_FILE is set, JSON is attempted first, then YAML:

```
anthropic:
  base_url: https://proxy.internal/anthropic
  beta: [prompt-caching-2024-07-31]
  default_options:
    model: claude-3-5-sonnet-latest
    max_output_tokens: 2048
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* reset_config_cache()
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    GEMINI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
)
from .env import ENV_PREFIX, is_placeholder, resolve_provider_key

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": OPENAI_DEFAULT_BASE_URL, "max_retries": DEFAULT_MAX_RETRIES},
    "openai-responses": {"base_url": OPENAI_DEFAULT_BASE_URL, "max_retries": DEFAULT_MAX_RETRIES},
    "anthropic": {"base_url": ANTHROPIC_DEFAULT_BASE_URL, "max_retries": DEFAULT_MAX_RETRIES},
    "gemini": {"base_url": GEMINI_DEFAULT_BASE_URL, "max_retries": DEFAULT_MAX_RETRIES},
}

ENV_FIELD_MAP = {
    "base_url": "BASE_URL",
    "timeout": "TIMEOUT",
    "max_retries": "MAX_RETRIES",
    "organization": "ORGANIZATION",
    "project": "PROJECT",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless their value looks like a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    _DOTENV_LOADED = True
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                os.environ[k] = v


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    data: Any = {}
    path = os.getenv("AIKIT_CONFIG_FILE")
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the cached config file and .env state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = ENV_PREFIX.get(provider, provider.upper().replace("-", "_"))
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    key, _ = resolve_provider_key(provider)
    if key and not is_placeholder(key):
        out["api_key"] = key
    if model := os.getenv(f"{prefix}_MODEL"):
        out["default_options"] = {"model": model}
    return out


def _merge(cfg: Dict[str, Any], layer: Dict[str, Any]) -> None:
    """Overlay ``layer`` onto ``cfg``; ``default_options`` merges one level deep."""
    for key, value in layer.items():
        if key == "default_options" and isinstance(value, dict):
            cfg["default_options"] = {**cfg.get("default_options", {}), **value}
        else:
            cfg[key] = value


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored so callers can forward optional
    keyword arguments unchanged.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    _merge(cfg, dict(DEFAULTS.get(name, {})))
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        _merge(cfg, file_cfg)
    _merge(cfg, _env_overrides(name))
    if overrides:
        _merge(cfg, {k: v for k, v in overrides.items() if v is not None})
    return cfg


__all__ = [
    "get_provider_config",
    "reset_config_cache",
    "DEFAULTS",
]
