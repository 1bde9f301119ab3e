"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, transport exception
mapping for ``httpx``, and message-based heuristics as a last resort.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Dict

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
    529: ErrorCode.UNAVAILABLE,  # Anthropic "overloaded"
}


_PATTERN_GROUPS = (
    (ErrorCode.TIMEOUT, ("timeout",)),
    (ErrorCode.TIMEOUT, ("timed out",)),
    (ErrorCode.AUTH, ("api key",)),
    (ErrorCode.AUTH, ("unauthorized",)),
    (ErrorCode.AUTH, ("forbidden",)),
    (ErrorCode.UNSUPPORTED, ("unsupported",)),
    (ErrorCode.UNSUPPORTED, ("not supported",)),
    (ErrorCode.NOT_FOUND, ("not found",)),
    (ErrorCode.UNAVAILABLE, ("unavailable",)),
    (ErrorCode.UNAVAILABLE, ("overloaded",)),
    (ErrorCode.VALIDATION, ("invalid",)),
    (ErrorCode.VALIDATION, ("malformed",)),
    (ErrorCode.SERVER_ERROR, ("server error",)),
    (ErrorCode.SERVER_ERROR, ("internal error",)),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    """Substring heuristic mapping for exceptions without a status code."""
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    for code, patterns in _PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (builtin, asyncio, httpx).
        3. Cancellation.
        4. HTTP status mapping.
        5. httpx transport failures (treated as transient).
        6. Substring heuristics.
        7. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, asyncio.CancelledError):
        return ErrorCode.CANCELLED
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
