"""Observability hooks for cache events.

The store never logs on its own. It reports events to a hooks object;
``LoggingHooks`` turns them into log records.
"""

import logging
from typing import Protocol, runtime_checkable

from stalecache.types import Key

logger = logging.getLogger(__name__)

# reasons passed to on_refresh
REASON_MISS = "miss"
REASON_EXPIRED = "expired"
REASON_INVALIDATED = "invalidated"


@runtime_checkable
class CacheHooks(Protocol):
    """Receives cache events. Implementations must not raise."""

    def on_hit(self, key: Key, pending: bool) -> None:
        """Stored data was returned; ``pending`` if a refresh is in flight."""
        ...

    def on_refresh(self, key: Key, reason: str) -> None:
        """The producer is about to run for ``key``."""
        ...

    def on_write(self, key: Key) -> None:
        """A new entry was stored, by ``set`` or a refresh."""
        ...

    def on_error(self, key: Key, error: BaseException) -> None:
        """The producer for ``key`` failed."""
        ...


class SilentHooks:
    """Performs no operations. The store default."""

    def on_hit(self, key: Key, pending: bool) -> None:
        pass

    def on_refresh(self, key: Key, reason: str) -> None:
        pass

    def on_write(self, key: Key) -> None:
        pass

    def on_error(self, key: Key, error: BaseException) -> None:
        pass


class LoggingHooks:
    """Log every cache event.

    Hits, refreshes and writes go out at ``log_level``; producer failures at
    WARNING, since the exception is also re-raised to the caller.
    """

    def __init__(
        self, log_level: int = logging.DEBUG, log: logging.Logger | None = None
    ) -> None:
        self._log_level = log_level
        self._logger = log or logger

    def on_hit(self, key: Key, pending: bool) -> None:
        if pending:
            self._logger.log(
                self._log_level, "Cache HIT for key '%s' (refresh pending)", key
            )
        else:
            self._logger.log(self._log_level, "Cache HIT for key '%s'", key)

    def on_refresh(self, key: Key, reason: str) -> None:
        self._logger.log(
            self._log_level, "Cache REFRESH for key '%s' (%s)", key, reason
        )

    def on_write(self, key: Key) -> None:
        self._logger.log(self._log_level, "Cache WRITE for key '%s'", key)

    def on_error(self, key: Key, error: BaseException) -> None:
        self._logger.warning(
            "Cache producer for key '%s' failed: %s (%s)",
            key,
            error,
            type(error).__name__,
        )


class CompositeHooks:
    """Fan events out to several hooks.

    A failing hook is logged and skipped; it never breaks a cache operation.

    Example:
        hooks = CompositeHooks([LoggingHooks(), my_metrics_hooks])
    """

    def __init__(self, hooks: list[CacheHooks]) -> None:
        self._hooks = list(hooks)

    def on_hit(self, key: Key, pending: bool) -> None:
        for hook in self._hooks:
            try:
                hook.on_hit(key, pending)
            except Exception as e:
                logger.warning("Hook error in on_hit for key '%s': %s", key, e)

    def on_refresh(self, key: Key, reason: str) -> None:
        for hook in self._hooks:
            try:
                hook.on_refresh(key, reason)
            except Exception as e:
                logger.warning("Hook error in on_refresh for key '%s': %s", key, e)

    def on_write(self, key: Key) -> None:
        for hook in self._hooks:
            try:
                hook.on_write(key)
            except Exception as e:
                logger.warning("Hook error in on_write for key '%s': %s", key, e)

    def on_error(self, key: Key, error: BaseException) -> None:
        for hook in self._hooks:
            try:
                hook.on_error(key, error)
            except Exception as e:
                logger.warning("Hook error in on_error for key '%s': %s", key, e)

    def add_hook(self, hook: CacheHooks) -> None:
        """Add a new hook to the composite."""
        self._hooks.append(hook)

    def remove_hook(self, hook: CacheHooks) -> bool:
        """Remove a hook. Returns False if it was not registered."""
        try:
            self._hooks.remove(hook)
            return True
        except ValueError:
            return False
