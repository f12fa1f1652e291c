"""Configuration defaults and the three-layer config resolver.

Precedence for the effective config of a key:

1. Per-call override (highest precedence)
2. Config stored on the key's current entry
3. Instance default (lowest precedence)

The instance default itself comes from the constructor argument, then the
``STALECACHE_DEFAULT_STALE_TIME`` environment variable, then
``DEFAULT_STALE_TIME``.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any

from stalecache.duration import parse_duration
from stalecache.types import CacheConfig, ConfigOverride

logger = logging.getLogger(__name__)

ENV_DEFAULT_STALE_TIME = "STALECACHE_DEFAULT_STALE_TIME"

DEFAULT_STALE_TIME = 0  # always stale: every access refreshes

_OPTIONS = frozenset({"stale_time"})


def _overrides(config: ConfigOverride) -> dict[str, Any]:
    """Turn any accepted config shape into a dict of explicitly set options."""
    if config is None:
        return {}
    if isinstance(config, CacheConfig):
        return {"stale_time": config.stale_time}
    if not isinstance(config, Mapping):
        raise TypeError(f"Expected CacheConfig or mapping, got {type(config)}")

    unknown = set(config) - _OPTIONS
    if unknown:
        raise ValueError(f"Unknown cache config option(s): {sorted(unknown)}")
    result = dict(config)
    if result.get("stale_time") is not None:
        result["stale_time"] = parse_duration(result["stale_time"])
    else:
        result.pop("stale_time", None)
    return result


def default_config(config: ConfigOverride = None) -> CacheConfig:
    """Build the instance-level default config.

    A negative ``stale_time`` here falls back to the environment or the
    built-in default, never below zero.
    """
    fallback = DEFAULT_STALE_TIME
    env_value = os.getenv(ENV_DEFAULT_STALE_TIME)
    if env_value:
        env_value = env_value.strip()
        if env_value.lstrip("-").isdigit():
            env_ms = int(env_value)
        else:
            env_ms = parse_duration(env_value)
        if env_ms >= 0:
            fallback = env_ms
        else:
            logger.warning(
                "Ignoring negative %s=%r", ENV_DEFAULT_STALE_TIME, env_value
            )

    stale_time = _overrides(config).get("stale_time", fallback)
    if stale_time < 0:
        stale_time = fallback
    return CacheConfig(stale_time=stale_time)


def normalize_config(config: CacheConfig, default: CacheConfig) -> CacheConfig:
    """Replace a negative ``stale_time`` with the default's."""
    if config.stale_time < 0:
        return CacheConfig(stale_time=default.stale_time)
    return config


def resolve_config(
    default: CacheConfig,
    stored: CacheConfig | None = None,
    override: ConfigOverride = None,
) -> CacheConfig:
    """Merge default, stored and override layers into one config.

    Pure: inputs are never mutated.
    """
    merged = _overrides(default)
    merged.update(_overrides(stored))
    merged.update(_overrides(override))
    return normalize_config(CacheConfig(**merged), default)
