"""CacheStore - the public cache API.

This module provides the key-addressed cache:
- cache(), cache_sync(): Cached producer calls with single-flight refresh
- get(), set(): Raw access to stored data
- remove(), invalidate(): Exact or prefix-matched eviction / staleness
- drop(), dump(): Lifecycle and inspection
- cached(): Decorator over cache() / cache_sync()
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Callable, Mapping, Sequence
from functools import wraps
from typing import Any, TypeVar

from stalecache.adapters.memory import MemoryStorage
from stalecache.config import default_config, normalize_config, resolve_config
from stalecache.duration import now_ms
from stalecache.hooks import CacheHooks, CompositeHooks, SilentHooks
from stalecache.keys import create_key, find_matching
from stalecache.refresh import RefreshOrchestrator
from stalecache.types import (
    AsyncProducer,
    CacheConfig,
    CacheEntry,
    ConfigOverride,
    FailurePolicy,
    Key,
    KeyPart,
    Producer,
)

T = TypeVar("T")


class CacheStore:
    """In-process cache of producer results with time-based staleness.

    Every instance is independent; there is no shared global store.

    Usage:
        store = CacheStore({"stale_time": "5m"})

        async def get_books() -> list[dict]:
            return await store.cache("books", fetch_books)

        store.invalidate("books")           # next call refreshes
        store.remove("user:", exact=False)  # drop a whole namespace
    """

    def __init__(
        self,
        config: ConfigOverride = None,
        preloaded_storage: Mapping[Key, CacheEntry[Any]] | None = None,
        *,
        clock: Callable[[], int] | None = None,
        hooks: CacheHooks | None = None,
        failure_policy: FailurePolicy = FailurePolicy.MARK_STALE,
    ) -> None:
        self._config = default_config(config)
        self._clock = clock or now_ms
        self._hooks: CacheHooks = (
            CompositeHooks([hooks]) if hooks is not None else SilentHooks()
        )
        self._failure_policy = failure_policy
        self._storage = MemoryStorage(preloaded_storage)
        for key in self._storage.keys():
            entry = self._storage.get(key)
            if entry is not None:
                entry.config = normalize_config(entry.config, self._config)
        self._lock = threading.RLock()
        self._orchestrator = RefreshOrchestrator(
            self._storage,
            self._config,
            lock=self._lock,
            clock=self._clock,
            hooks=self._hooks,
            failure_policy=failure_policy,
        )

    @property
    def config(self) -> CacheConfig:
        """Instance-level default config."""
        return self._config

    @property
    def failure_policy(self) -> FailurePolicy:
        """What a failed refresh does to the stored entry."""
        return self._failure_policy

    # -------------------------------------------------------------------------
    # Keys
    # -------------------------------------------------------------------------

    def create_key(self, parts: Sequence[KeyPart]) -> Key:
        """Join ordered scalar parts into one key, e.g. ``"user:42"``."""
        return create_key(parts)

    # -------------------------------------------------------------------------
    # Raw access
    # -------------------------------------------------------------------------

    def get(self, key: Key) -> Any | None:
        """Stored data for ``key``, stale or not. None if absent."""
        with self._lock:
            entry = self._storage.get(key)
            return entry.data if entry is not None else None

    def set(self, key: Key, data: Any, config: ConfigOverride = None) -> None:
        """Create or overwrite the entry for ``key``, timestamped now."""
        with self._lock:
            resolved = resolve_config(self._config, None, config)
            self._storage.set(
                key,
                CacheEntry(
                    data=data,
                    config=resolved,
                    timestamp=self._clock(),
                    is_stale=resolved.stale_time == 0,
                ),
            )
        self._hooks.on_write(key)

    def remove(self, key: Key, exact: bool = True) -> None:
        """Delete ``key``, or every key starting with ``key`` if not exact."""
        with self._lock:
            for match in find_matching(key, self._storage.keys(), exact=exact):
                self._storage.delete(match)

    def invalidate(self, key: Key, exact: bool = True) -> None:
        """Mark ``key`` (or every key starting with it) stale.

        Data stays available through ``get``; the next ``cache`` call for a
        marked key runs its producer regardless of the remaining stale time.
        """
        with self._lock:
            for match in find_matching(key, self._storage.keys(), exact=exact):
                entry = self._storage.get(match)
                if entry is not None:
                    entry.is_stale = True

    def drop(self) -> None:
        """Remove every entry and forget every pending refresh."""
        with self._lock:
            self._storage.clear()
            self._orchestrator.clear_pending()

    def dump(self) -> dict[Key, CacheEntry[Any]]:
        """Snapshot of all entries. Mutating it does not affect the store."""
        with self._lock:
            return self._storage.snapshot()

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._storage

    # -------------------------------------------------------------------------
    # In-flight refreshes
    # -------------------------------------------------------------------------

    def is_pending(self, key: Key) -> bool:
        """True while a producer call for ``key`` has not settled."""
        return self._orchestrator.is_pending(key)

    def pending_keys(self) -> frozenset[Key]:
        """Snapshot of every key with a refresh in flight."""
        return self._orchestrator.pending_keys()

    # -------------------------------------------------------------------------
    # Cached producer calls
    # -------------------------------------------------------------------------

    async def cache(
        self,
        key: Key,
        producer: AsyncProducer[T],
        config: ConfigOverride = None,
    ) -> T:
        """Return cached data for ``key``, refreshing it with ``producer``.

        Args:
            key: Cache key
            producer: Zero-argument callable; may return an awaitable
            config: Per-call override, e.g. ``{"stale_time": "30s"}``

        Returns:
            Stored data on a hit (or while another refresh is in flight),
            otherwise the producer's fresh result.

        Raises:
            Whatever the producer raised, unmodified.
        """
        return await self._orchestrator.run(key, producer, config)

    def cache_sync(
        self,
        key: Key,
        producer: Producer[T],
        config: ConfigOverride = None,
    ) -> T:
        """Synchronous ``cache``. The producer must return a plain value."""
        return self._orchestrator.run_sync(key, producer, config)

    def cached(
        self,
        *,
        namespace: str | None = None,
        config: ConfigOverride = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator that caches a function under its positional arguments.

        The key is ``create_key([namespace or fn.__qualname__, *args])``, so
        ``store.remove(namespace, exact=False)`` clears every cached call.

        Usage:
            @store.cached(namespace="user")
            async def get_user(user_id: int) -> dict:
                return await fetch_user(user_id)
        """

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            prefix = namespace or fn.__qualname__

            if inspect.iscoroutinefunction(fn):

                @wraps(fn)
                async def async_wrapper(*args: KeyPart) -> Any:
                    key = create_key([prefix, *args])
                    return await self.cache(key, lambda: fn(*args), config)

                return async_wrapper

            @wraps(fn)
            def wrapper(*args: KeyPart) -> Any:
                key = create_key([prefix, *args])
                return self.cache_sync(key, lambda: fn(*args), config)

            return wrapper

        return decorator


__all__ = ["CacheStore"]
