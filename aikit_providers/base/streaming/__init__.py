"""Streaming package.

Shared building blocks for the vendor stream decoders and for consumers of
``generate`` streams:

- ``sse``: ``data:`` line extraction and JSON frame parsing.
- ``stream_state``: per-generation accumulation of text and tool calls.
- ``decoder``: the ``StreamDecoder`` base class and finish-reason mapping.
- ``streaming_metrics``: counters logged on ``stream.end``.
- ``stream_utils``: collect/process/filter/map helpers for callers.
"""

from .decoder import StreamDecoder, map_finish_reason
from .sse import iter_json_frames, iter_sse_data, parse_sse_line
from .stream_state import PendingToolCall, StreamState, parse_tool_arguments
from .stream_utils import (
    StreamResult,
    collect_deltas,
    collect_stream,
    filter_stream,
    map_stream,
    process_stream,
)
from .streaming_metrics import StreamMetrics

__all__ = [
    "StreamDecoder",
    "map_finish_reason",
    "iter_json_frames",
    "iter_sse_data",
    "parse_sse_line",
    "PendingToolCall",
    "StreamState",
    "parse_tool_arguments",
    "StreamResult",
    "collect_deltas",
    "collect_stream",
    "filter_stream",
    "map_stream",
    "process_stream",
    "StreamMetrics",
]
