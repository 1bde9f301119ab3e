"""Typed construction-time configuration for provider adapters.

Purpose
-------
Provide a small, provider-agnostic DTO that captures the parameters every
adapter is constructed with. It is validated exactly once, when the provider
is built, so repeated ``generate`` calls never re-validate credentials.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and `.model_dump()` convenience.

Failure modes & side effects
----------------------------
- Pure data container: no I/O side effects. ``pydantic.ValidationError`` is
  raised for an empty API key or invalid numeric values; the provider facade
  re-raises it as ``ConfigurationError``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator


class ProviderConfig(BaseModel):
    """Common provider construction parameters.

    Attributes
    ----------
    api_key:
        Vendor API key. Required and non-empty; passed through verbatim.
    base_url:
        Optional override for the vendor endpoint (proxies, gateways).
    timeout:
        Whole-call time budget for one ``generate`` or ``embed`` call, in
        seconds (float), like httpx and asyncio; not milliseconds, so
        ``30000`` ms is written ``30.0``. ``None`` falls back to the central
        timeout configuration.
    max_retries:
        Extra attempts for opening the stream when the failure is retryable.
        Retries never happen once a frame has been received.
    organization / project:
        OpenAI organization and project headers.
    beta:
        Anthropic beta feature flags sent as ``anthropic-beta``.
    headers:
        Additional static HTTP headers merged over the vendor defaults.
    default_options:
        Construction-time generation options; call-time options override
        them field by field.
    """

    api_key: str
    base_url: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    max_retries: int = Field(default=0, ge=0)
    organization: Optional[str] = None
    project: Optional[str] = None
    beta: List[str] = Field(default_factory=list)
    headers: Mapping[str, str] = Field(default_factory=dict)
    default_options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("api_key must be a non-empty string")
        return value.strip()

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        return value.rstrip("/") if value else value


__all__ = ["ProviderConfig"]
