"""Normalized finish reasons shared by every vendor decoder."""
from __future__ import annotations

from enum import Enum


class FinishReason(str, Enum):
    """Why a generation ended.

    Vendor-native stop codes are mapped onto these values by fixed tables
    in each decoder module.
    """

    STOP = "stop"
    LENGTH = "length"
    TOOL_USE = "tool_use"
    ERROR = "error"


__all__ = ["FinishReason"]
