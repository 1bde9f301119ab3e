"""Retry policy for the stream-open phase.

Only the act of opening a stream (connect, send, status check) is retried.
Once the first frame has been received the generation is never replayed,
so callers never observe duplicated chunks.

- Retries errors flagged ``retryable`` or carrying a configured retryable code.
- Exponential backoff: ``initial_delay * delay_base ** attempt``.
- Each attempt outcome is reported to an optional ``attempt_logger``.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Protocol, TypeVar

from ..errors import ErrorCode, ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 1
    delay_base: float = 2.0
    initial_delay: float = 0.5
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.UNAVAILABLE,
    )
    attempt_logger: AttemptLogger | None = None

    def delays(self) -> Iterable[float]:
        for attempt in range(self.max_attempts - 1):
            yield self.initial_delay * self.delay_base**attempt

    @classmethod
    def from_max_retries(cls, max_retries: int, **kwargs) -> "RetryConfig":
        """Build a config allowing ``max_retries`` attempts after the first."""
        return cls(max_attempts=1 + max(0, max_retries), **kwargs)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    func: Callable[[], Awaitable[T]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
) -> T:
    """Await ``func()`` applying the retry policy in ``config``.

    ``func`` is a zero-argument factory so every attempt gets a fresh
    awaitable. Non-``ProviderError`` exceptions propagate immediately.
    """
    for attempt, delay in enumerate(list(config.delays()) + [None]):
        try:
            result = await func()
        except ProviderError as e:
            will_retry = (e.retryable or e.code in config.retryable_codes) and delay is not None
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay=delay if will_retry else None,
                    error=e,
                )
            if will_retry:
                await asyncio.sleep(delay)
                continue
            raise
        if config.attempt_logger and attempt > 0:
            config.attempt_logger(
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay=None,
                error=None,
            )
        return result
    raise RuntimeError("retry_async: loop exited without result")  # pragma: no cover


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "retry_async",
]
