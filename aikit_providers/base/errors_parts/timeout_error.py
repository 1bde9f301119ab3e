"""Timeout error raised when a generation exceeds its configured budget."""
from __future__ import annotations

from dataclasses import dataclass, field

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass
class ProviderTimeoutError(ProviderError, TimeoutError):
    """Configured timeout elapsed before the stream completed.

    Subclasses the builtin :class:`TimeoutError` so generic ``except
    TimeoutError`` handlers catch it as well.
    """

    code: ErrorCode = field(default=ErrorCode.TIMEOUT)
    message: str = "generation timed out"
    provider: str = "unknown"
    timeout_seconds: float | None = None


__all__ = ["ProviderTimeoutError"]
