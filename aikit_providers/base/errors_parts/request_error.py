"""
Request error raised when the transport fails before streaming begins.

Carries the HTTP status (``None`` for connection-level failures) and the
vendor's error body so callers can inspect the rejection without re-issuing
the request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError

_RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


@dataclass
class RequestError(ProviderError):
    """HTTP error status or network failure prior to the first stream frame.

    Attributes:
        status: HTTP status code returned by the vendor, or ``None`` when the
            connection itself failed.
        body: Raw response body text (vendor error payload), possibly empty.
    """

    status: Optional[int] = None
    body: str = ""

    @classmethod
    def from_status(
        cls,
        status: int,
        body: str,
        *,
        provider: str,
        model: Optional[str] = None,
    ) -> "RequestError":
        """Build a ``RequestError`` classified from an HTTP status code."""
        # Local import keeps classification free of a circular dependency.
        from .classification import _HTTP_STATUS_MAP

        code = _HTTP_STATUS_MAP.get(status)
        if code is None:
            code = ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.VALIDATION
        return cls(
            code=code,
            message=f"HTTP {status}: {body[:500]}" if body else f"HTTP {status}",
            provider=provider,
            model=model,
            retryable=status in _RETRYABLE_STATUSES,
            status=status,
            body=body,
        )


__all__ = ["RequestError"]
