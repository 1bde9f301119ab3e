"""Unified timeout utilities for providers.

This module centralizes the timeout values used by the HTTP transport and the
streaming facade, and exposes :class:`Deadline`, an async helper that bounds a
whole ``generate`` call by a single wall-clock budget.

Key Components
--------------
TimeoutConfig
    Frozen dataclass of normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use only. Supported environment variables (all optional):
        AIKIT_TIMEOUT_CONNECT_SECONDS
        AIKIT_TIMEOUT_OVERALL_SECONDS

Deadline
    Tracks the remaining budget of one call. ``await deadline.run(aw)``
    awaits ``aw`` for at most the remaining time, raising
    :class:`ProviderTimeoutError` when the budget is exhausted. The budget is
    checked before every transport read, so a stalled stream cannot outlive
    it and content is never silently truncated.

Design Constraints
------------------
1. No hard-coded ad-hoc timeouts outside this module.
2. Avoid per-call env parsing (cache after first read).
3. Deterministic in tests: ``Deadline`` accepts an injectable clock.
"""
from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from .errors import ProviderTimeoutError

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the HTTP connection.
        overall_timeout_seconds: Default whole-call budget for ``generate``
            when the provider config does not set ``timeout``.
    """

    connect_timeout_seconds: float = 10.0
    overall_timeout_seconds: float = 600.0


_CACHED: TimeoutConfig | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603 - documented module cache
    if _CACHED is None:
        defaults = TimeoutConfig()
        _CACHED = TimeoutConfig(
            connect_timeout_seconds=_parse_env_float(
                "AIKIT_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds
            ),
            overall_timeout_seconds=_parse_env_float(
                "AIKIT_TIMEOUT_OVERALL_SECONDS", defaults.overall_timeout_seconds
            ),
        )
    return _CACHED


def reset_timeout_config_cache() -> None:
    """Drop the cached configuration so the next access re-reads the env."""
    global _CACHED  # noqa: PLW0603
    _CACHED = None


class Deadline:
    """Wall-clock budget shared by every await of a single generation."""

    def __init__(
        self,
        seconds: float,
        *,
        provider: str = "unknown",
        model: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.seconds = seconds
        self._provider = provider
        self._model = model
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def error(self) -> ProviderTimeoutError:
        return ProviderTimeoutError(
            message=f"generation exceeded {self.seconds:g}s timeout",
            provider=self._provider,
            model=self._model,
            timeout_seconds=self.seconds,
        )

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` within the remaining budget.

        The awaitable runs in the caller's task, so cancelling the caller
        cancels it directly.
        """
        remaining = self.remaining()
        if remaining <= 0.0:
            # Close un-awaited coroutines to avoid "never awaited" warnings.
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            raise self.error()
        scope = asyncio.timeout(remaining)
        try:
            async with scope:
                return await awaitable
        except TimeoutError as exc:
            if not scope.expired():
                raise
            raise self.error() from exc


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "reset_timeout_config_cache",
    "Deadline",
]
