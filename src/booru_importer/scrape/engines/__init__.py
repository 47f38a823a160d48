"""Site-specific extraction engines."""

from .twitter import Twitter

__all__ = ["Twitter"]
