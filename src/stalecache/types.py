"""Core types for stalecache."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Key = str
KeyPart = str | int | float | bool

# Duration type alias
Duration = str | int | timedelta  # "30s", "5m", timedelta(minutes=5) or milliseconds

Producer = Callable[[], T]
AsyncProducer = Callable[[], Awaitable[T] | T]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Per-entry cache settings."""

    stale_time: int  # milliseconds, >= 0 once normalized


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    """A cached value with metadata."""

    data: T
    config: CacheConfig
    timestamp: int  # Unix timestamp ms of the last successful write
    is_stale: bool = False

    def is_expired(self, config: CacheConfig, now: int) -> bool:
        """Check if the entry has outlived ``config.stale_time`` at ``now``."""
        return now >= self.timestamp + config.stale_time

    def copy(self) -> "CacheEntry[T]":
        """Shallow copy; ``data`` is shared."""
        return replace(self)


class FailurePolicy(Enum):
    """What happens to the stored entry when a refresh fails."""

    MARK_STALE = "mark_stale"
    EVICT = "evict"


ConfigOverride = CacheConfig | dict[str, Any] | None
