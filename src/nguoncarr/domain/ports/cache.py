"""Cache Port - Interface for the in-process bounded caches."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol


class CachePort(Protocol):
    """Port for a capacity-limited key-value store.

    Implementations:
      - BoundedCache (OrderedDict-backed LRU)

    The store never judges freshness itself. Callers keep a
    ``CacheEntry`` as the value and decide on read whether it is stale.
    """

    def get(self, key: Hashable) -> Any:
        """Retrieve value and mark it most recently used. None = not found."""
        ...

    def set(self, key: Hashable, value: Any) -> None:
        """Insert value at the most recently used end, evicting on overflow."""
        ...

    def __contains__(self, key: object) -> bool: ...

    def __len__(self) -> int: ...
