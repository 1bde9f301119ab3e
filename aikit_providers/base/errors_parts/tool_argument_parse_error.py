"""Error raised when buffered tool-call arguments do not form a JSON object."""
from __future__ import annotations

from dataclasses import dataclass, field

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass
class ToolArgumentParseError(ProviderError):
    """Concatenated argument fragments for a tool call are not valid JSON.

    Attributes:
        tool_call_id: Identifier of the offending call.
        raw_arguments: The full concatenated argument string as received.
    """

    code: ErrorCode = field(default=ErrorCode.TOOL_ARGUMENTS)
    message: str = "tool call arguments are not valid JSON"
    provider: str = "unknown"
    tool_call_id: str = ""
    raw_arguments: str = ""


__all__ = ["ToolArgumentParseError"]
