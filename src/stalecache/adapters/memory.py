"""In-memory storage adapter."""

from collections.abc import Iterator, Mapping
from typing import Any

from stalecache.types import CacheEntry, Key


class MemoryStorage:
    """Dict-backed storage. Unbounded: nothing is evicted on its own."""

    def __init__(
        self, preloaded: Mapping[Key, CacheEntry[Any]] | None = None
    ) -> None:
        self._cache: dict[Key, CacheEntry[Any]] = {}
        if preloaded:
            for key, entry in preloaded.items():
                self._cache[key] = entry.copy()

    def get(self, key: Key) -> CacheEntry[Any] | None:
        """Get a cache entry by key."""
        return self._cache.get(key)

    def set(self, key: Key, entry: CacheEntry[Any]) -> None:
        """Store a cache entry."""
        self._cache[key] = entry

    def delete(self, key: Key) -> bool:
        """Delete a cache entry."""
        return self._cache.pop(key, None) is not None

    def keys(self) -> Iterator[Key]:
        """Iterate over a copy of the keys, safe against concurrent deletes."""
        return iter(list(self._cache))

    def clear(self) -> None:
        """Clear all cached entries."""
        self._cache.clear()

    def snapshot(self) -> dict[Key, CacheEntry[Any]]:
        """Copy every entry so callers cannot mutate stored state."""
        return {key: entry.copy() for key, entry in self._cache.items()}

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache
