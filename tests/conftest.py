"""Shared pytest fixtures."""

import pytest

from stalecache import CacheConfig, CacheEntry, CacheStore


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 1_330_688_329_321) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment out of default config resolution."""
    monkeypatch.delenv("STALECACHE_DEFAULT_STALE_TIME", raising=False)


@pytest.fixture
def clock() -> FakeClock:
    """Create a frozen clock for each test."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CacheStore:
    """Create a CacheStore with a 1s default stale time."""
    return CacheStore({"stale_time": 1000}, clock=clock)


@pytest.fixture
def preloaded() -> dict:
    """Two entries sharing the "foo" prefix."""
    return {
        "foo": CacheEntry(
            data=123,
            timestamp=987654321,
            config=CacheConfig(stale_time=1000),
            is_stale=False,
        ),
        "foo2": CacheEntry(
            data=223,
            timestamp=987654322,
            config=CacheConfig(stale_time=2000),
            is_stale=False,
        ),
    }
