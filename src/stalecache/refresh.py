"""Refresh orchestration: hit/miss decisions and in-flight tracking.

A key is refreshed by at most one producer call at a time. Callers that
arrive while a refresh is in flight get the previously stored value back
immediately; they are neither joined to the running call nor allowed to
start a second one.
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from stalecache.adapters.base import StorageAdapter
from stalecache.config import resolve_config
from stalecache.exceptions import AwaitableResultError
from stalecache.hooks import (
    REASON_EXPIRED,
    REASON_INVALIDATED,
    REASON_MISS,
    CacheHooks,
)
from stalecache.types import (
    AsyncProducer,
    CacheConfig,
    CacheEntry,
    ConfigOverride,
    FailurePolicy,
    Key,
    Producer,
)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Lookup:
    """Outcome of the hit/miss decision for one call."""

    hit: bool
    data: Any
    config: CacheConfig
    # identifies this call's pending marker; None on a hit
    token: object | None = None


class RefreshOrchestrator:
    """Decides hit/miss/stale for a key and runs the producer on a miss.

    The decision and the pending-marker insert happen inside one critical
    section of ``lock``. The lock is never held while a producer runs.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        default: CacheConfig,
        *,
        lock: threading.RLock,
        clock: Callable[[], int],
        hooks: CacheHooks,
        failure_policy: FailurePolicy = FailurePolicy.MARK_STALE,
    ) -> None:
        self._storage = storage
        self._default = default
        self._lock = lock
        self._clock = clock
        self._hooks = hooks
        self._failure_policy = failure_policy
        self._pending: dict[Key, object] = {}

    # -------------------------------------------------------------------------
    # Pending markers
    # -------------------------------------------------------------------------

    def is_pending(self, key: Key) -> bool:
        with self._lock:
            return key in self._pending

    def pending_keys(self) -> frozenset[Key]:
        with self._lock:
            return frozenset(self._pending)

    def clear_pending(self) -> None:
        """Forget every in-flight marker (their producers still settle)."""
        with self._lock:
            self._pending.clear()

    # -------------------------------------------------------------------------
    # Decision and settlement
    # -------------------------------------------------------------------------

    def begin(self, key: Key, override: ConfigOverride = None) -> Lookup:
        """Return stored data on a hit, otherwise mark ``key`` pending."""
        with self._lock:
            entry = self._storage.get(key)
            config = resolve_config(
                self._default, entry.config if entry else None, override
            )
            pending = key in self._pending
            reason = REASON_MISS

            if entry is not None:
                expired = entry.is_expired(config, self._clock())
                if pending or not (entry.is_stale or expired):
                    lookup = Lookup(hit=True, data=entry.data, config=config)
                else:
                    reason = REASON_INVALIDATED if entry.is_stale else REASON_EXPIRED
                    lookup = self._mark_pending(key, config)
            else:
                lookup = self._mark_pending(key, config)

        if lookup.hit:
            self._hooks.on_hit(key, pending)
        else:
            self._hooks.on_refresh(key, reason)
        return lookup

    def _mark_pending(self, key: Key, config: CacheConfig) -> Lookup:
        token = object()
        self._pending[key] = token
        return Lookup(hit=False, data=None, config=config, token=token)

    def _owns(self, key: Key, lookup: Lookup) -> bool:
        # a drop() or a newer refresh may have replaced our marker
        return self._pending.get(key) is lookup.token

    def complete(self, key: Key, lookup: Lookup, data: Any) -> None:
        """Store the fresh value and clear the pending marker.

        A superseded refresh leaves storage alone.
        """
        with self._lock:
            if not self._owns(key, lookup):
                return
            now = self._clock()
            previous = self._storage.get(key)
            if previous is not None and previous.timestamp > now:
                now = previous.timestamp
            self._storage.set(
                key,
                CacheEntry(
                    data=data,
                    config=lookup.config,
                    timestamp=now,
                    is_stale=lookup.config.stale_time == 0,
                ),
            )
            del self._pending[key]
        self._hooks.on_write(key)

    def fail(self, key: Key, lookup: Lookup, error: BaseException) -> None:
        """Apply the failure policy and clear the pending marker.

        A superseded refresh leaves storage alone; the error still reaches
        hooks and the caller.
        """
        with self._lock:
            if self._owns(key, lookup):
                if self._failure_policy is FailurePolicy.EVICT:
                    self._storage.delete(key)
                else:
                    entry = self._storage.get(key)
                    if entry is not None:
                        entry.is_stale = True
                del self._pending[key]
        self._hooks.on_error(key, error)

    # -------------------------------------------------------------------------
    # Producer execution
    # -------------------------------------------------------------------------

    async def run(
        self,
        key: Key,
        producer: AsyncProducer[T],
        override: ConfigOverride = None,
    ) -> T:
        """Async refresh. The producer call is the only suspension point."""
        lookup = self.begin(key, override)
        if lookup.hit:
            return cast(T, lookup.data)

        try:
            result = producer()
            if inspect.isawaitable(result):
                result = await result
        except BaseException as e:
            self.fail(key, lookup, e)
            raise

        self.complete(key, lookup, result)
        return cast(T, result)

    def run_sync(
        self,
        key: Key,
        producer: Producer[T],
        override: ConfigOverride = None,
    ) -> T:
        """Sync refresh. Never suspends."""
        lookup = self.begin(key, override)
        if lookup.hit:
            return cast(T, lookup.data)

        try:
            result = producer()
            if inspect.isawaitable(result):
                close = getattr(result, "close", None)
                if close is not None:
                    close()
                raise AwaitableResultError(
                    f"Producer for key '{key}' returned an awaitable; "
                    "use cache() for async producers",
                    key=key,
                )
        except BaseException as e:
            self.fail(key, lookup, e)
            raise

        self.complete(key, lookup, result)
        return result
