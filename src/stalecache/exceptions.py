"""Exceptions raised by stalecache itself.

Producer exceptions are never wrapped: they reach the caller of
``cache``/``cache_sync`` exactly as the producer raised them.
"""


class CacheError(Exception):
    """Base error for cache operations."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class InvalidKeyError(CacheError, TypeError):
    """A key part has a type that cannot be encoded into a key."""

    pass


class AwaitableResultError(CacheError, TypeError):
    """A synchronous refresh got an awaitable back from its producer."""

    pass
