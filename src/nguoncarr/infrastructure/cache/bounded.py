"""Capacity-limited LRU store backing the HTTP and detail caches.

Recency is tracked by an ``OrderedDict``: the first key is the least
recently used, the last key the most recently used.  Reads move a hit
to the MRU end.  Freshness is not this class's concern; callers store
``CacheEntry`` values and skip stale hits on their own.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable, Iterator
from typing import Any


class BoundedCache:
    """LRU key-value store with a fixed capacity.

    Thread-safety note: this class is *not* thread-safe but is safe
    for single-threaded asyncio (no concurrent mutations within one
    event loop tick).
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = capacity
        self._data: OrderedDict[Hashable, Any] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: Hashable) -> Any:
        """Return the value for *key* and mark it most recently used."""
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def set(self, key: Hashable, value: Any) -> None:
        """Insert *value* at the MRU end; evict one LRU entry on overflow."""
        self._data.pop(key, None)
        self._data[key] = value
        if len(self._data) > self._capacity:
            self._data.popitem(last=False)

    def keys(self) -> list[Hashable]:
        """Keys ordered from least to most recently used."""
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        # Membership does not count as an access.
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._data))
