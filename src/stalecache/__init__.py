"""stalecache - In-process stale-time cache with single-flight refresh."""

from contextlib import suppress

# Storage
from stalecache.adapters import MemoryStorage, StorageAdapter

# Configuration
from stalecache.config import (
    DEFAULT_STALE_TIME,
    ENV_DEFAULT_STALE_TIME,
    default_config,
    resolve_config,
)

# Duration parsing
from stalecache.duration import parse_duration

# Exceptions
from stalecache.exceptions import AwaitableResultError, CacheError, InvalidKeyError

# Observability
from stalecache.hooks import CacheHooks, CompositeHooks, LoggingHooks, SilentHooks

# Keys
from stalecache.keys import create_key, split_key

# Store API
from stalecache.store import CacheStore

# Core types
from stalecache.types import (
    CacheConfig,
    CacheEntry,
    Duration,
    FailurePolicy,
    Key,
    KeyPart,
)

# Optional HTTP producers - only available when httpx is installed
with suppress(ImportError):
    from stalecache.producers import http_json, http_json_sync

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_STALE_TIME",
    "ENV_DEFAULT_STALE_TIME",
    "AwaitableResultError",
    "CacheConfig",
    "CacheEntry",
    "CacheError",
    "CacheHooks",
    "CacheStore",
    "CompositeHooks",
    "Duration",
    "FailurePolicy",
    "InvalidKeyError",
    "Key",
    "KeyPart",
    "LoggingHooks",
    "MemoryStorage",
    "SilentHooks",
    "StorageAdapter",
    "create_key",
    "default_config",
    "http_json",
    "http_json_sync",
    "parse_duration",
    "resolve_config",
    "split_key",
]
