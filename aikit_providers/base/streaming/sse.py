"""Server-sent event line parsing shared by every vendor decoder.

Vendors stream ``text/event-stream`` bodies where each event carries one JSON
document on a single ``data:`` line. Helpers here are deliberately tolerant:

- lines that are not ``data:`` lines (``event:``, ``id:``, comments, blank
  separators) are ignored;
- empty ``data:`` payloads are skipped;
- the OpenAI-style ``[DONE]`` sentinel ends the stream;
- payloads that are not valid JSON objects are logged at debug level and
  skipped rather than aborting the generation.
"""
from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterable, AsyncIterator, Dict, Optional

DONE_SENTINEL = "[DONE]"
_DATA_PREFIX = "data:"


def parse_sse_line(line: str) -> Optional[str]:
    """Return the data payload of an SSE line, or ``None`` if it carries none."""
    line = line.rstrip("\r\n")
    if not line.startswith(_DATA_PREFIX):
        return None
    data = line[len(_DATA_PREFIX):].strip()
    return data or None


async def iter_sse_data(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield non-empty ``data:`` payloads until ``[DONE]`` or end of input."""
    async for line in lines:
        data = parse_sse_line(line)
        if data is None:
            continue
        if data == DONE_SENTINEL:
            return
        yield data


async def iter_json_frames(
    lines: AsyncIterable[str],
    logger: Optional[logging.Logger] = None,
) -> AsyncIterator[Dict[str, Any]]:
    """Yield each SSE payload parsed as a JSON object."""
    async for data in iter_sse_data(lines):
        try:
            frame = json.loads(data)
        except json.JSONDecodeError:
            if logger is not None:
                logger.debug("skipping malformed stream frame: %.200s", data)
            continue
        if isinstance(frame, dict):
            yield frame


__all__ = ["DONE_SENTINEL", "parse_sse_line", "iter_sse_data", "iter_json_frames"]
