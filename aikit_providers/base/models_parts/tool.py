"""Tool declaration offered to the model for a single request."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Tool:
    """A callable tool the model may choose to invoke.

    Attributes:
        name: Tool name, unique within a request.
        description: What the tool does; vendors surface this to the model.
        parameters: JSON-schema mapping describing the arguments. Passed to
            vendors untouched; no validation is performed here.
    """

    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)


__all__ = ["Tool"]
