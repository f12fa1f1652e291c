"""Base storage protocol for cache entries."""

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

from stalecache.types import CacheEntry, Key


@runtime_checkable
class StorageAdapter(Protocol):
    """Sync key -> entry storage.

    Adapters are plain containers. Locking, staleness and pattern matching
    are the store's job.
    """

    def get(self, key: Key) -> CacheEntry[Any] | None:
        """Get a cache entry by key."""
        ...

    def set(self, key: Key, entry: CacheEntry[Any]) -> None:
        """Store a cache entry."""
        ...

    def delete(self, key: Key) -> bool:
        """Delete a cache entry. Returns False if the key was absent."""
        ...

    def keys(self) -> Iterator[Key]:
        """Iterate over a stable copy of the stored keys."""
        ...

    def clear(self) -> None:
        """Clear all cached entries."""
        ...

    def snapshot(self) -> dict[Key, CacheEntry[Any]]:
        """Independent copy of every entry."""
        ...

    def __len__(self) -> int: ...
