"""
Cache regions for the caching provider.

Each region holds one kind of value with its own eviction policy:
- SingletonCache: at most one entry (the version manifest)
- KeyedCache: unbounded, for small parsed documents
- LRUCache: bounded by entry count, least-recently-used eviction, for raw payloads

INVARIANTS:
- A lookup never calls out; regions only hold values that were stored
- LRU recency is refreshed by both reads and writes
- Region maps are guarded by a lock held only for the map operation itself
"""

import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Generic, Literal, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class _Sentinel(Enum):
    MISSING = "missing"


MISSING: Literal[_Sentinel.MISSING] = _Sentinel.MISSING


@dataclass
class CacheStats:
    """Counters recorded per cache region."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0


class CacheRegion(ABC, Generic[K, V]):
    """A key → value store with a region-specific retention policy."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = Lock()
        self._stats = CacheStats()

    def lookup(self, key: K) -> V | Literal[_Sentinel.MISSING]:
        """
        Get a cached value.

        Returns:
            The value, or MISSING if the key is not cached
        """
        with self._lock:
            value = self._get(key)
            if value is MISSING:
                self._stats.misses += 1
            else:
                self._stats.hits += 1
        return value

    def store(self, key: K, value: V) -> None:
        """Cache a value under a key, replacing any previous value."""
        with self._lock:
            self._put(key, value)

    def clear(self) -> None:
        """Remove every entry. Statistics are kept."""
        with self._lock:
            self._clear()

    def stats(self) -> CacheStats:
        """Snapshot of the region's counters."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
            )

    @abstractmethod
    def _get(self, key: K) -> V | Literal[_Sentinel.MISSING]: ...

    @abstractmethod
    def _put(self, key: K, value: V) -> None: ...

    @abstractmethod
    def _clear(self) -> None: ...

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __contains__(self, key: object) -> bool: ...


class SingletonCache(CacheRegion[K, V]):
    """Holds at most one entry. Storing a new key replaces the old entry."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._entry: tuple[K, V] | None = None

    def _get(self, key: K) -> V | Literal[_Sentinel.MISSING]:
        if self._entry is None or self._entry[0] != key:
            return MISSING
        return self._entry[1]

    def _put(self, key: K, value: V) -> None:
        self._entry = (key, value)

    def _clear(self) -> None:
        self._entry = None

    def __len__(self) -> int:
        return 0 if self._entry is None else 1

    def __contains__(self, key: object) -> bool:
        return self._entry is not None and self._entry[0] == key


class KeyedCache(CacheRegion[K, V]):
    """Unbounded key → value cache."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._entries: dict[K, V] = {}

    def _get(self, key: K) -> V | Literal[_Sentinel.MISSING]:
        return self._entries.get(key, MISSING)

    def _put(self, key: K, value: V) -> None:
        self._entries[key] = value

    def _clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


class LRUCache(CacheRegion[K, V]):
    """
    Bounded cache evicting the least-recently-used entry.

    Entries are ordered oldest → newest access. Reads and writes both move
    an entry to the newest end; inserting past capacity drops the oldest.
    """

    def __init__(self, name: str, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"LRU capacity must be at least 1, got {capacity}")
        super().__init__(name)
        self.capacity = capacity
        self._entries: OrderedDict[K, V] = OrderedDict()

    def _get(self, key: K) -> V | Literal[_Sentinel.MISSING]:
        if key not in self._entries:
            return MISSING
        self._entries.move_to_end(key)
        return self._entries[key]

    def _put(self, key: K, value: V) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("CACHE_EVICT", extra={"region": self.name, "key": evicted})

    def _clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[K]:
        """Cached keys, least recently used first. Does not refresh recency."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership checks do not count as access
        return key in self._entries
