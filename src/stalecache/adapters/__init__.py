"""Storage adapters for stalecache."""

from stalecache.adapters.base import StorageAdapter
from stalecache.adapters.memory import MemoryStorage

__all__ = [
    "MemoryStorage",
    "StorageAdapter",
]
