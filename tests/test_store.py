"""Tests for raw store operations."""

from stalecache import CacheConfig, CacheEntry, CacheStore


class TestGet:
    """Tests for get()."""

    def test_returns_preloaded_data(self, preloaded: dict) -> None:
        """Test that get returns data of an available entry."""
        store = CacheStore(preloaded_storage=preloaded)
        assert store.get("foo") == 123

    def test_missing_key_returns_none(self, store: CacheStore) -> None:
        """Test that get returns None for an unknown key."""
        assert store.get("baz") is None

    def test_returns_stale_data(self, preloaded: dict) -> None:
        """Test that get ignores staleness."""
        store = CacheStore(preloaded_storage=preloaded)
        store.invalidate("foo")
        assert store.get("foo") == 123

    def test_preloaded_storage_is_copied(self, preloaded: dict) -> None:
        """Test that the store does not alias the preloaded entries."""
        store = CacheStore(preloaded_storage=preloaded)
        store.invalidate("foo")
        assert preloaded["foo"].is_stale is False

    def test_preloaded_negative_stale_time_normalized(self) -> None:
        """Test that preloaded entries never keep a negative stale_time."""
        entry = CacheEntry(data=1, config=CacheConfig(stale_time=-5), timestamp=0)
        store = CacheStore({"stale_time": 1000}, {"k": entry})
        assert store.dump()["k"].config == CacheConfig(stale_time=1000)
        assert entry.config == CacheConfig(stale_time=-5)


class TestSet:
    """Tests for set()."""

    def test_set_then_get(self, store: CacheStore) -> None:
        """Test that set data is returned by get."""
        data = {"foo": 1}
        store.set("foo", data)
        assert store.get("foo") is data

    def test_set_uses_default_config(self, clock) -> None:
        """Test that set creates an entry with the instance default config."""
        store = CacheStore(clock=clock)
        store.set("foo", {"foo": 1})
        assert store.dump() == {
            "foo": CacheEntry(
                data={"foo": 1},
                config=CacheConfig(stale_time=0),
                timestamp=clock.now,
                is_stale=True,
            )
        }

    def test_set_with_custom_config(self, clock) -> None:
        """Test that a per-call config is stored on the entry."""
        store = CacheStore(clock=clock)
        store.set("foo", {"foo": 1}, {"stale_time": 2000})
        assert store.dump() == {
            "foo": CacheEntry(
                data={"foo": 1},
                config=CacheConfig(stale_time=2000),
                timestamp=clock.now,
                is_stale=False,
            )
        }

    def test_set_overwrites(self, store: CacheStore, clock) -> None:
        """Test that set replaces data and timestamp."""
        store.set("foo", 1)
        clock.advance(10)
        store.set("foo", 2)
        entry = store.dump()["foo"]
        assert entry.data == 2
        assert entry.timestamp == clock.now

    def test_set_does_not_inherit_previous_config(self, store: CacheStore) -> None:
        """Test that set resolves config from the default, not the old entry."""
        store.set("foo", 1, {"stale_time": 5000})
        store.set("foo", 2)
        assert store.dump()["foo"].config == CacheConfig(stale_time=1000)

    def test_negative_stale_time_uses_default(self, store: CacheStore) -> None:
        """Test that a negative stale time is normalized to the default."""
        store.set("foo", 1, {"stale_time": -5})
        assert store.dump()["foo"].config == CacheConfig(stale_time=1000)


class TestRemove:
    """Tests for remove()."""

    def test_exact_match(self, preloaded: dict) -> None:
        """Test removing a single entry by exact key."""
        store = CacheStore(preloaded_storage=preloaded)
        store.remove("foo", True)
        assert store.dump() == {"foo2": preloaded["foo2"]}

    def test_exact_is_default(self, preloaded: dict) -> None:
        """Test that remove matches exactly unless told otherwise."""
        store = CacheStore(preloaded_storage=preloaded)
        store.remove("foo")
        assert list(store.dump()) == ["foo2"]

    def test_prefix_match(self, preloaded: dict) -> None:
        """Test removing every entry that starts with the pattern."""
        store = CacheStore(preloaded_storage=preloaded)
        store.remove("foo", False)
        assert store.dump() == {}

    def test_prefix_match_is_not_substring(self, store: CacheStore) -> None:
        """Test that keys merely containing the pattern survive."""
        store.set("user:1", "a")
        store.set("admin:user:1", "b")
        store.remove("user", exact=False)
        assert list(store.dump()) == ["admin:user:1"]

    def test_missing_key_is_noop(self, preloaded: dict) -> None:
        """Test that removing an unknown key changes nothing."""
        store = CacheStore(preloaded_storage=preloaded)
        store.remove("baz")
        store.remove("baz", exact=False)
        assert store.dump() == preloaded


class TestInvalidate:
    """Tests for invalidate()."""

    def test_exact_match(self, preloaded: dict) -> None:
        """Test invalidating a single entry by exact key."""
        store = CacheStore(preloaded_storage=preloaded)
        store.invalidate("foo", True)
        dump = store.dump()
        assert dump["foo"].is_stale is True
        assert dump["foo"].data == 123
        assert dump["foo2"] == preloaded["foo2"]

    def test_prefix_match(self, preloaded: dict) -> None:
        """Test invalidating every entry that starts with the pattern."""
        store = CacheStore(preloaded_storage=preloaded)
        store.invalidate("foo", False)
        dump = store.dump()
        assert dump["foo"].is_stale is True
        assert dump["foo2"].is_stale is True
        assert dump["foo2"].timestamp == preloaded["foo2"].timestamp

    def test_missing_key_is_noop(self, preloaded: dict) -> None:
        """Test that invalidating an unknown key changes nothing."""
        store = CacheStore(preloaded_storage=preloaded)
        store.invalidate("baz")
        store.invalidate("baz", exact=False)
        assert store.dump() == preloaded


class TestDump:
    """Tests for dump()."""

    def test_returns_current_storage(self, preloaded: dict) -> None:
        """Test that dump mirrors the stored entries."""
        store = CacheStore(preloaded_storage=preloaded)
        assert store.dump() == preloaded

    def test_snapshot_is_independent(self, preloaded: dict) -> None:
        """Test that mutating the snapshot leaves the store untouched."""
        store = CacheStore(preloaded_storage=preloaded)
        snapshot = store.dump()
        snapshot["foo"].is_stale = True
        del snapshot["foo2"]
        assert store.dump() == preloaded


class TestDrop:
    """Tests for drop()."""

    def test_removes_everything(self, preloaded: dict) -> None:
        """Test that drop empties the store."""
        store = CacheStore(preloaded_storage=preloaded)
        store.drop()
        assert store.dump() == {}
        assert len(store) == 0


class TestCreateKey:
    """Tests for the create_key method."""

    def test_joins_parts(self, store: CacheStore) -> None:
        """Test that parts are joined in order."""
        assert store.create_key(["foo", "bar", 1, 2]) == "foo:bar:1:2"

    def test_trailing_empty_part_is_distinct(self, store: CacheStore) -> None:
        """Test that an empty trailing part yields a different key."""
        assert store.create_key(["foo"]) != store.create_key(["foo", ""])

    def test_composite_keys_namespace_prefix_removal(self, store: CacheStore) -> None:
        """Test that keys built from a common prefix can be removed together."""
        store.set(store.create_key(["user", 1]), "a")
        store.set(store.create_key(["user", 2]), "b")
        store.set(store.create_key(["post", 1]), "c")
        store.remove(store.create_key(["user", ""]), exact=False)
        assert list(store.dump()) == ["post:1"]


class TestIsolation:
    """Tests for independent store instances."""

    def test_instances_do_not_share_state(self, clock) -> None:
        """Test that two stores never see each other's entries."""
        first = CacheStore(clock=clock)
        second = CacheStore(clock=clock)
        first.set("foo", 1)
        assert second.get("foo") is None
        assert "foo" in first
        assert "foo" not in second
