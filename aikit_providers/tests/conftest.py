"""Pytest configuration for the providers test suite.

Every test runs against a scrubbed environment: vendor API key variables,
``AIKIT_*`` overrides and any ``.env`` file in the working directory are
ignored, and the module-level config and timeout caches are reset, so results
never depend on the developer's shell.

HTTP is faked with ``httpx.MockTransport``; the ``sse_response`` and
``mock_transport`` fixtures build canned event-stream responses and a
transport serving them.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List

import httpx
import pytest

_ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_TIMEOUT",
    "OPENAI_MAX_RETRIES",
    "OPENAI_ORGANIZATION",
    "OPENAI_PROJECT",
    "ANTHROPIC_BASE_URL",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_TIMEOUT",
    "ANTHROPIC_MAX_RETRIES",
    "GEMINI_BASE_URL",
    "GEMINI_MODEL",
    "AIKIT_CONFIG_FILE",
    "AIKIT_LOG_LEVEL",
    "AIKIT_TIMEOUT_CONNECT_SECONDS",
    "AIKIT_TIMEOUT_OVERALL_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear provider env vars and reset cached configuration around each test."""
    from aikit_providers.base.timeouts import reset_timeout_config_cache
    from aikit_providers.config import reset_config_cache

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    reset_timeout_config_cache()
    yield
    reset_config_cache()
    reset_timeout_config_cache()


class ListHandler(logging.Handler):
    """Collect formatted log messages for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.messages.append(record.getMessage())

    def events(self, name: str | None = None) -> List[Dict[str, Any]]:
        """Return the JSON payloads logged so far, optionally filtered by event."""
        out: List[Dict[str, Any]] = []
        for message in self.messages:
            try:
                payload = json.loads(message)
            except ValueError:
                continue
            if isinstance(payload, dict) and (name is None or payload.get("event") == name):
                out.append(payload)
        return out


@pytest.fixture()
def log_capture(monkeypatch: pytest.MonkeyPatch) -> Iterator[ListHandler]:
    """Attach a ``ListHandler`` to the shared ``aikit`` logger at DEBUG level."""
    from aikit_providers.base.logging import get_logger

    monkeypatch.setenv("AIKIT_LOG_LEVEL", "DEBUG")
    logger = get_logger()
    handler = ListHandler()
    logger.addHandler(handler)
    yield handler
    logger.removeHandler(handler)


def _sse_body(frames: Iterable[Any], done: bool) -> bytes:
    lines = []
    for frame in frames:
        data = frame if isinstance(frame, str) else json.dumps(frame)
        lines.append(f"data: {data}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


@pytest.fixture()
def sse_response() -> Callable[..., httpx.Response]:
    """Return a builder for ``text/event-stream`` responses.

    Frames may be mappings (JSON-encoded) or raw strings sent verbatim as the
    ``data:`` payload.
    """

    def _build(frames: Iterable[Any], *, done: bool = False, status: int = 200) -> httpx.Response:
        return httpx.Response(
            status,
            content=_sse_body(frames, done),
            headers={"content-type": "text/event-stream"},
        )

    return _build


@pytest.fixture()
def mock_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], Any]:
    """Return a builder wrapping a request handler into an ``HttpTransport``."""
    from aikit_providers.base.http import HttpTransport

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
        return HttpTransport(transport=httpx.MockTransport(handler))

    return _build


@pytest.fixture()
def body_lines() -> Callable[..., Any]:
    """Return a builder for async iterators over raw SSE body lines."""

    def _build(*lines: str):
        async def _gen():
            for line in lines:
                yield line

        return _gen()

    return _build
