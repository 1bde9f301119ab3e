"""Configuration error raised for invalid construction-time or call-time input."""
from __future__ import annotations

from dataclasses import dataclass, field

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass
class ConfigurationError(ProviderError):
    """Missing or invalid configuration (empty API key, missing model, ...).

    Never retried. Raised before any network I/O takes place.
    """

    code: ErrorCode = field(default=ErrorCode.VALIDATION)
    message: str = "invalid configuration"
    provider: str = "unknown"


__all__ = ["ConfigurationError"]
