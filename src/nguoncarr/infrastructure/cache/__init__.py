"""Cache Infrastructure - in-process bounded caches."""

from .bounded import BoundedCache

__all__ = ["BoundedCache"]
