"""BaseProvider: the streaming facade shared by every vendor adapter.

Purpose:
- Bind one validated :class:`ProviderConfig`, one :class:`HttpTransport` and
  the vendor hooks (URL, headers, request serializer, stream decoder) behind a
  single ``generate(messages, options)`` async iterator.
- :class:`ProviderClient` holds the construction half (config, transport,
  headers, retry logging) and is shared with the embedding adapters.

External dependencies:
- ``pydantic`` validation of the config (once, at construction) and of the
  merged generation options (once per call).
- ``httpx`` indirectly, through :class:`HttpTransport`.

Lifecycle of one ``generate`` call:
1. Merge ``config.default_options`` with the call options (call wins) and
   coerce them to ``options_model``. Invalid options or a missing model raise
   :class:`ConfigurationError` before any I/O.
2. Serialize the body and log ``stream.start``.
3. Open the stream (retried on retryable open failures only), feed each line
   to a fresh decoder and yield chunks as they are produced.
4. Log ``stream.end`` or ``stream.error`` with the emitted count, finish
   reason and token usage.

Timeout strategy:
- The whole call, connect through the last frame, shares one
  :class:`Deadline` of ``config.timeout`` seconds (or the central
  ``overall_timeout_seconds``). Expiry raises :class:`ProviderTimeoutError`.

Cancellation:
- Closing the iterator (``aclose``, ``break`` followed by collection, task
  cancellation) unwinds the ``async with`` blocks, which close the HTTP
  response immediately. No further frames are read.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Sequence, Type, Union

from pydantic import ValidationError

from ..config import get_provider_config
from ..config.env import get_env_var_name
from .dto.generation_options import GenerationOptions
from .dto.provider_config import ProviderConfig
from .errors import ConfigurationError, ErrorCode, ProviderError
from .http.transport import HttpTransport
from .interfaces import LLMProvider
from .logging import LogContext, get_logger, normalized_log_event
from .models import Message, StreamChunk
from .resilience.retry import RetryConfig
from .streaming.decoder import StreamDecoder
from .streaming.streaming_metrics import StreamMetrics
from .timeouts import Deadline, get_timeout_config

OptionsInput = Union[GenerationOptions, Mapping[str, Any], None]


def _validation_summary(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def options_error_message(exc: ValidationError) -> str:
    """Message for a rejected options merge; a missing model gets its own."""
    if any(tuple(err.get("loc", ())) == ("model",) for err in exc.errors()):
        return "a non-empty model is required"
    return f"invalid options: {_validation_summary(exc)}"


class ProviderClient:
    """Configured vendor client: resolved config, transport, logger, headers.

    Shared by the streaming facade and the embedding adapters. Subclasses set
    ``provider_name`` and ``default_base_url`` and implement
    :meth:`build_headers`.
    """

    provider_name: str = "unknown"
    default_base_url: str = ""
    accept: str = "application/json"

    def __init__(
        self,
        config: Union[ProviderConfig, Mapping[str, Any], None] = None,
        *,
        transport: Optional[HttpTransport] = None,
        **overrides: Any,
    ) -> None:
        """Resolve and validate the provider configuration.

        Parameters:
            config: Explicit configuration (model or mapping). Its fields are
                applied over the defaults, config file and environment.
            transport: HTTP transport to use; tests inject one wrapping an
                ``httpx.MockTransport``.
            **overrides: Individual config fields (``api_key=...``,
                ``base_url=...``); these win over ``config``.

        Raises:
            ConfigurationError: Missing/empty API key or invalid field values.
        """
        if isinstance(config, ProviderConfig):
            explicit: Dict[str, Any] = config.model_dump(exclude_unset=True)
        else:
            explicit = dict(config or {})
        explicit.update(overrides)
        resolved = get_provider_config(self.provider_name, explicit)
        try:
            self.config = ProviderConfig.model_validate(resolved)
        except ValidationError as exc:
            raise ConfigurationError(
                message=self._config_error_message(exc),
                provider=self.provider_name,
                raw=exc,
            ) from exc
        self._transport = transport or HttpTransport()
        self._logger = get_logger(f"providers.{self.provider_name}")

    def _config_error_message(self, exc: ValidationError) -> str:
        if any(tuple(err.get("loc", ())) == ("api_key",) for err in exc.errors()):
            env_name = get_env_var_name(self.provider_name)
            hint = f" (pass api_key or set {env_name})" if env_name else ""
            return f"missing or empty API key for '{self.provider_name}'{hint}"
        return f"invalid provider configuration: {_validation_summary(exc)}"

    def build_headers(self) -> Dict[str, str]:  # pragma: no cover - abstract
        """Return vendor auth and version headers."""
        raise NotImplementedError

    @property
    def base_url(self) -> str:
        return (self.config.base_url or self.default_base_url).rstrip("/")

    def request_headers(self) -> Dict[str, str]:
        """Vendor headers overlaid with ``config.headers`` (config wins)."""
        headers = {"accept": self.accept, **self.build_headers()}
        headers.update(self.config.headers)
        return headers

    def _timeout_seconds(self) -> float:
        return self.config.timeout or get_timeout_config().overall_timeout_seconds

    def _build_retry_config(self, ctx: LogContext) -> RetryConfig:
        def _attempt_logger(*, attempt: int, max_attempts: int, delay: Optional[float], error: Optional[ProviderError]) -> None:
            normalized_log_event(
                self._logger,
                "retry.attempt",
                ctx,
                phase="open",
                attempt=attempt,
                error_code=(error.code.value if error else None),
                emitted=False,
                tokens=None,
                max_attempts=max_attempts,
                delay=delay,
                will_retry=bool(error and delay is not None),
            )

        return RetryConfig.from_max_retries(self.config.max_retries, attempt_logger=_attempt_logger)

    async def aclose(self) -> None:
        """Release the HTTP client owned by this client's transport."""
        await self._transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class BaseProvider(ProviderClient, LLMProvider):
    """Reusable streaming facade.

    Subclasses must set ``provider_name``, ``options_model`` and
    ``default_base_url``, and implement :meth:`build_url`,
    :meth:`build_headers`, :meth:`serialize` and :meth:`create_decoder`.
    """

    provider_name: str = "unknown"
    options_model: Type[GenerationOptions] = GenerationOptions
    accept = "text/event-stream"

    # ----- vendor hooks -----
    def build_url(self, options: GenerationOptions) -> str:  # pragma: no cover - abstract
        """Return the streaming endpoint for ``options.model``."""
        raise NotImplementedError

    def serialize(self, messages: Sequence[Message], options: GenerationOptions) -> Dict[str, Any]:  # pragma: no cover - abstract
        """Build the vendor request body."""
        raise NotImplementedError

    def create_decoder(self, model: str) -> StreamDecoder:  # pragma: no cover - abstract
        """Return a fresh decoder for one generation."""
        raise NotImplementedError

    # ----- shared helpers -----
    def resolve_options(self, options: OptionsInput = None) -> GenerationOptions:
        """Merge construction defaults with ``options`` into ``options_model``.

        Raises:
            ConfigurationError: Invalid values, or no non-empty ``model``.
        """
        try:
            return self.options_model.merge(self.config.default_options, options)
        except ValidationError as exc:
            raise ConfigurationError(
                message=options_error_message(exc),
                provider=self.provider_name,
                raw=exc,
            ) from exc

    # ----- public surface -----
    async def generate(
        self,
        messages: Sequence[Message],
        options: OptionsInput = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream one generation as normalized :class:`StreamChunk` values.

        Raises:
            ConfigurationError: Invalid options or missing model (before I/O).
            RequestError: Non-2xx status or connection failure before the
                first frame (after the configured retries).
            ProviderStreamError: Vendor error frame, lost connection or
                truncated stream.
            ToolArgumentParseError: Tool-call arguments that are not a JSON
                object.
            ProviderTimeoutError: The whole-call timeout elapsed.
        """
        opts = self.resolve_options(options)
        model = opts.model
        ctx = LogContext(provider=self.provider_name, model=model)
        body = self.serialize(messages, opts)
        url = self.build_url(opts)
        deadline = Deadline(self._timeout_seconds(), provider=self.provider_name, model=model)
        decoder = self.create_decoder(model)
        metrics = StreamMetrics()
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=False,
            tokens=None,
            messages=len(messages),
            tools=len(opts.tools or ()),
        )
        try:
            async with self._transport.stream_lines(
                url,
                headers=self.request_headers(),
                body=body,
                deadline=deadline,
                retry_config=self._build_retry_config(ctx),
                provider=self.provider_name,
                model=model,
            ) as lines:
                async with aclosing(decoder.decode_lines(lines)) as chunks:
                    async for chunk in chunks:
                        metrics.observe(chunk)
                        yield chunk
        except ProviderError as exc:
            self._log_stream_error(ctx, metrics, exc.code.value, exc.message)
            raise
        except asyncio.CancelledError:
            self._log_stream_error(ctx, metrics, ErrorCode.CANCELLED.value, "cancelled")
            raise
        metrics.close()
        normalized_log_event(
            self._logger,
            "stream.end",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=metrics.emitted,
            tokens=metrics.tokens(),
            finish_reason=metrics.finish_reason,
            tool_calls=metrics.tool_calls,
            time_to_first_token_ms=metrics.time_to_first_token_ms,
            total_duration_ms=metrics.total_duration_ms,
        )

    def _log_stream_error(self, ctx: LogContext, metrics: StreamMetrics, code: str, message: str) -> None:
        metrics.close()
        normalized_log_event(
            self._logger,
            "stream.error",
            ctx,
            phase="finalize",
            attempt=None,
            error_code=code,
            emitted=metrics.emitted,
            tokens=metrics.tokens(),
            level=logging.WARNING,
            message=message,
            total_duration_ms=metrics.total_duration_ms,
        )


__all__ = ["BaseProvider", "ProviderClient", "options_error_message"]
