"""Async HTTP transport for streaming vendor responses.

Purpose:
    Wrap ``httpx.AsyncClient`` behind one operation, :meth:`HttpTransport.stream_lines`,
    which POSTs a JSON body and yields the response body line by line. The
    provider facade depends only on this class, so tests inject an
    ``httpx.MockTransport`` and never touch the network.

External dependencies:
    - ``httpx`` for the asynchronous client and streaming responses.

Timeout strategy:
    - The client itself carries only a connect timeout from
      :func:`get_timeout_config`; reads are unbounded at the httpx level.
    - Every await (send, error body read, each line) runs under the caller's
      :class:`Deadline`, which enforces the whole-call budget.

Failure modes:
    - Non-2xx status: the error body is read, the response closed, and a
      :class:`RequestError` carrying status and body is raised before any
      line is yielded.
    - Connection-level failures before the first line: ``RequestError`` with
      ``status=None``.
    - Connection lost mid-stream: :class:`ProviderStreamError`.
    - Retries (``retry_async``) apply to the open phase only.
    - ``post_json`` (embeddings) reads the whole body under the same
      deadline; a body that is not a JSON object raises ``RequestError``
      with code ``server_error``.

Lifecycle & cleanup:
    - ``stream_lines`` is an async context manager; leaving it (normally, by
      exception, or because the consumer abandoned iteration) closes the
      line iterator and the HTTP response immediately.
    - A transport created without an explicit client lazily creates and owns
      one; :meth:`aclose` releases it.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Mapping, Optional

import httpx

from ..errors import ErrorCode, ProviderStreamError, RequestError, classify_exception
from ..resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry_async
from ..timeouts import Deadline, get_timeout_config


class HttpTransport:
    """Thin streaming POST client shared by every provider adapter."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            cfg = get_timeout_config()
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(None, connect=cfg.connect_timeout_seconds),
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying client when this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _open(
        self,
        url: str,
        headers: Mapping[str, str],
        body: Dict[str, Any],
        deadline: Deadline,
        provider: str,
        model: Optional[str],
    ) -> httpx.Response:
        client = self._get_client()
        request = client.build_request("POST", url, headers=dict(headers), json=body)
        try:
            response = await deadline.run(client.send(request, stream=True))
        except httpx.HTTPError as exc:
            raise RequestError(
                code=classify_exception(exc),
                message=f"request failed: {exc.__class__.__name__}: {exc}",
                provider=provider,
                model=model,
                retryable=True,
                raw=exc,
            ) from exc
        if not response.is_success:
            try:
                raw = await deadline.run(response.aread())
            finally:
                await response.aclose()
            raise RequestError.from_status(
                response.status_code,
                raw.decode("utf-8", errors="replace"),
                provider=provider,
                model=model,
            )
        return response

    async def _iter_lines(
        self,
        response: httpx.Response,
        deadline: Deadline,
        provider: str,
        model: Optional[str],
    ) -> AsyncIterator[str]:
        lines = response.aiter_lines()
        try:
            while True:
                try:
                    line = await deadline.run(lines.__anext__())
                except StopAsyncIteration:
                    return
                yield line
        except httpx.HTTPError as exc:
            raise ProviderStreamError(
                code=classify_exception(exc),
                message=f"connection lost mid-stream: {exc}",
                provider=provider,
                model=model,
                raw=exc,
            ) from exc
        finally:
            await lines.aclose()

    @asynccontextmanager
    async def stream_lines(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Dict[str, Any],
        deadline: Deadline,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> AsyncIterator[AsyncIterator[str]]:
        """Open a streaming POST and yield an async iterator over body lines.

        Raises:
            RequestError: Non-2xx status or connection failure (after retries).
            ProviderTimeoutError: ``deadline`` expired while opening.
        """
        response = await retry_async(
            lambda: self._open(url, headers, body, deadline, provider, model),
            retry_config,
        )
        lines = self._iter_lines(response, deadline, provider, model)
        try:
            yield lines
        finally:
            await lines.aclose()
            await response.aclose()

    async def post_json(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Dict[str, Any],
        deadline: Deadline,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        """POST ``body`` and return the decoded JSON object response.

        Raises:
            RequestError: Non-2xx status, connection failure, or a body that
                is not a JSON object.
            ProviderTimeoutError: ``deadline`` expired.
        """
        response = await retry_async(
            lambda: self._open(url, headers, body, deadline, provider, model),
            retry_config,
        )
        try:
            raw = await deadline.run(response.aread())
        except httpx.HTTPError as exc:
            raise RequestError(
                code=classify_exception(exc),
                message=f"reading response failed: {exc}",
                provider=provider,
                model=model,
                status=response.status_code,
                raw=exc,
            ) from exc
        finally:
            await response.aclose()
        text = raw.decode("utf-8", errors="replace")
        try:
            payload = json.loads(text)
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            raise RequestError(
                code=ErrorCode.SERVER_ERROR,
                message="response body is not a JSON object",
                provider=provider,
                model=model,
                status=response.status_code,
                body=text[:500],
            )
        return payload


__all__ = ["HttpTransport"]
