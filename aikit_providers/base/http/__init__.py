"""HTTP utilities package for providers.

Exposes the async streaming transport used by every adapter.
"""

from .transport import HttpTransport

__all__ = ["HttpTransport"]
