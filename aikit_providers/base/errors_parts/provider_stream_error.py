"""Error reported by the vendor in the middle of a stream."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass
class ProviderStreamError(ProviderError):
    """Vendor error frame (or truncated stream) terminating a generation.

    ``vendor_code`` holds the vendor's native error type/status string, e.g.
    ``"overloaded_error"`` for Anthropic or ``"RESOURCE_EXHAUSTED"`` for
    Gemini. No finish chunk is emitted once this is raised.
    """

    code: ErrorCode = field(default=ErrorCode.STREAM)
    message: str = "stream error"
    provider: str = "unknown"
    vendor_code: Optional[str] = None


__all__ = ["ProviderStreamError"]
