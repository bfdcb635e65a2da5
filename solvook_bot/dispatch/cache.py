"""
Lookup Cache Module

Caches for user and channel metadata. The cache is always passed in
explicitly; there is no module-level cache.
"""

import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional, Tuple


class LookupCache(ABC):
    """
    Abstract base class for lookup caches.

    This defines the interface that all cache implementations must follow.
    """

    @abstractmethod
    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        pass

    @abstractmethod
    def set(self, key: Hashable, value: Any) -> None:
        """Store a value."""
        pass


class InMemoryLRUCache(LookupCache):
    """
    Bounded in-process cache with least-recently-used eviction and a per-entry TTL.

    Entries older than ``ttl`` seconds are treated as absent. When the cache is
    full, the least recently read or written entry is evicted.
    """

    def __init__(self, max_size: int = 256, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[Hashable, Tuple[float, Any]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
