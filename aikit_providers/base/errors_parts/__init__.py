"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `aikit_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .configuration_error import ConfigurationError
from .request_error import RequestError
from .provider_stream_error import ProviderStreamError
from .tool_argument_parse_error import ToolArgumentParseError
from .timeout_error import ProviderTimeoutError
from .classification import classify_exception

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
