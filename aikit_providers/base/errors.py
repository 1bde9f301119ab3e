"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``aikit_providers.base.errors_parts`` to maintain a stable import path.

Taxonomy
--------
- ``ConfigurationError``: invalid construction/call input, raised before I/O.
- ``RequestError``: HTTP status or network failure before the first frame.
- ``ProviderStreamError``: vendor error frame mid-stream.
- ``ToolArgumentParseError``: buffered tool arguments are not valid JSON.
- ``ProviderTimeoutError``: the generation exceeded its time budget.

All of them derive from :class:`ProviderError` and carry an :class:`ErrorCode`.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.configuration_error import ConfigurationError
from .errors_parts.request_error import RequestError
from .errors_parts.provider_stream_error import ProviderStreamError
from .errors_parts.tool_argument_parse_error import ToolArgumentParseError
from .errors_parts.timeout_error import ProviderTimeoutError
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "RequestError",
    "ProviderStreamError",
    "ToolArgumentParseError",
    "ProviderTimeoutError",
    "classify_exception",
]
