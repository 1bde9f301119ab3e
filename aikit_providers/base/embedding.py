"""BaseEmbeddingProvider: the request/response facade for embedding adapters.

Purpose:
- Turn a list of texts into :class:`EmbeddingResponse` vectors through one
  JSON POST per batch, sharing construction (config, transport, headers,
  retry logging) with the streaming adapters via :class:`ProviderClient`.

Lifecycle of one ``embed`` call:
1. Validate the texts and merge the construction-time ``default_options``
   with the call options (call wins). Problems raise
   :class:`ConfigurationError` before any I/O.
2. Split the texts into batches of ``max_batch_size`` and POST each batch in
   order. Result indices refer to positions in the full input list.
3. Log ``embed.start`` and then ``embed.end`` or ``embed.error``.

Defaults:
- Embedding defaults are passed as ``default_options=`` and kept apart from
  ``config.default_options``; a chat model from ``<PREFIX>_MODEL`` is never
  used to embed.

Timeout strategy:
- Every batch shares one :class:`Deadline` of ``config.timeout`` seconds (or
  the central ``overall_timeout_seconds``).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type, Union

from pydantic import ValidationError

from .dto.embedding_options import EmbeddingOptions
from .interfaces import EmbeddingProvider
from .errors import ConfigurationError, ErrorCode, ProviderError
from .logging import LogContext, normalized_log_event
from .models import EmbeddingResponse, EmbeddingResult, GenerationUsage
from .provider import ProviderClient, options_error_message
from .timeouts import Deadline

EmbeddingOptionsInput = Union[EmbeddingOptions, Mapping[str, Any], None]


def add_usage(total: Optional[GenerationUsage], batch: Optional[GenerationUsage]) -> Optional[GenerationUsage]:
    """Sum token counts across batches; ``None`` fields stay ``None``."""
    if batch is None:
        return total
    if total is None:
        return batch

    def _sum(a: Optional[int], b: Optional[int]) -> Optional[int]:
        if a is None and b is None:
            return None
        return (a or 0) + (b or 0)

    return GenerationUsage(
        input_tokens=_sum(total.input_tokens, batch.input_tokens),
        total_tokens=_sum(total.total_tokens, batch.total_tokens),
    )


class BaseEmbeddingProvider(ProviderClient, EmbeddingProvider):
    """Reusable embedding facade.

    Subclasses set ``provider_name``, ``options_model``, ``default_base_url``
    and ``max_batch_size``, and implement :meth:`build_headers`,
    :meth:`build_url`, :meth:`serialize` and :meth:`parse_response`.
    """

    options_model: Type[EmbeddingOptions] = EmbeddingOptions
    max_batch_size: int = 100

    def __init__(
        self,
        config: Any = None,
        *,
        default_options: EmbeddingOptionsInput = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        self.default_options = default_options

    # ----- vendor hooks -----
    def build_url(self, options: EmbeddingOptions) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def serialize(self, texts: Sequence[str], options: EmbeddingOptions) -> Dict[str, Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def parse_response(
        self,
        payload: Dict[str, Any],
        options: EmbeddingOptions,
        count: int,
    ) -> Tuple[List[List[float]], Optional[GenerationUsage], Optional[str]]:  # pragma: no cover - abstract
        """Return ``count`` vectors in input order, the usage and the model."""
        raise NotImplementedError

    # ----- shared helpers -----
    def resolve_options(self, options: EmbeddingOptionsInput = None) -> EmbeddingOptions:
        try:
            return self.options_model.merge(self.default_options, options)
        except ValidationError as exc:
            raise ConfigurationError(
                message=options_error_message(exc),
                provider=self.provider_name,
                raw=exc,
            ) from exc

    def _validate_texts(self, texts: Sequence[str]) -> List[str]:
        if isinstance(texts, str):
            raise ConfigurationError(message="texts must be a sequence of strings, not a string", provider=self.provider_name)
        items = list(texts)
        if not items:
            raise ConfigurationError(message="at least one text must be provided", provider=self.provider_name)
        if not all(isinstance(t, str) for t in items):
            raise ConfigurationError(message="every text must be a string", provider=self.provider_name)
        return items

    def payload_error(self, message: str, model: Optional[str]) -> ProviderError:
        """Error for a 2xx body that lacks the expected vectors."""
        return ProviderError(code=ErrorCode.SERVER_ERROR, message=message, provider=self.provider_name, model=model)

    # ----- public surface -----
    async def embed(self, texts: Sequence[str], options: EmbeddingOptionsInput = None) -> EmbeddingResponse:
        """Embed ``texts`` and return one vector per text, in input order.

        Raises:
            ConfigurationError: No texts, non-string texts, invalid options or
                missing model (before I/O).
            RequestError: Non-2xx status, connection failure or a body that
                is not JSON (after the configured retries).
            ProviderError: A JSON body without the expected vectors.
            ProviderTimeoutError: The whole-call timeout elapsed.
        """
        items = self._validate_texts(texts)
        opts = self.resolve_options(options)
        model = opts.model
        ctx = LogContext(provider=self.provider_name, model=model)
        deadline = Deadline(self._timeout_seconds(), provider=self.provider_name, model=model)
        url = self.build_url(opts)
        normalized_log_event(
            self._logger,
            "embed.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=False,
            tokens=None,
            texts=len(items),
        )
        results: List[EmbeddingResult] = []
        usage: Optional[GenerationUsage] = None
        reported_model: Optional[str] = None
        try:
            for offset in range(0, len(items), self.max_batch_size):
                batch = items[offset:offset + self.max_batch_size]
                payload = await self._transport.post_json(
                    url,
                    headers=self.request_headers(),
                    body=self.serialize(batch, opts),
                    deadline=deadline,
                    retry_config=self._build_retry_config(ctx),
                    provider=self.provider_name,
                    model=model,
                )
                vectors, batch_usage, batch_model = self.parse_response(payload, opts, len(batch))
                results.extend(EmbeddingResult(values=v, index=offset + i) for i, v in enumerate(vectors))
                usage = add_usage(usage, batch_usage)
                reported_model = reported_model or batch_model
        except ProviderError as exc:
            normalized_log_event(
                self._logger,
                "embed.error",
                ctx,
                phase="finalize",
                attempt=None,
                error_code=exc.code.value,
                emitted=len(results),
                tokens=usage.to_dict() if usage else None,
                level=logging.WARNING,
                message=exc.message,
            )
            raise
        normalized_log_event(
            self._logger,
            "embed.end",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=len(results),
            tokens=usage.to_dict() if usage else None,
            dimensions=len(results[0].values) if results else None,
        )
        return EmbeddingResponse(embeddings=results, model=reported_model or model, usage=usage)


__all__ = ["BaseEmbeddingProvider", "add_usage"]
