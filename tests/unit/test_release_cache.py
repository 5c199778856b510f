"""Unit tests for plugin_updater.core.update.cache — TTL-bounded release cache."""

from __future__ import annotations

import pytest
from release_fakes import FakeClock

from plugin_updater.core.store.kv import MemoryStore
from plugin_updater.core.update.cache import ReleaseCache
from plugin_updater.core.update.models import CacheEntry, ReleaseRecord

KEY = "rank_math_api_github_release"


def _record(version: str = "1.1.0") -> ReleaseRecord:
    return ReleaseRecord(
        version=version,
        source_url=f"https://github.com/devora-as/rank-math-api-manager/releases/tag/v{version}",
        download_url=f"https://example.com/{version}.zip",
        published_at="2026-09-30T12:00:00Z",
        description="notes",
    )


class TestTTL:
    def test_hit_just_before_expiry(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = ReleaseCache(store, clock=clock)
        cache.put(KEY, _record(), ttl_seconds=3600)
        clock.advance(3599)
        assert cache.get(KEY) == _record()

    def test_miss_just_after_expiry(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = ReleaseCache(store, clock=clock)
        cache.put(KEY, _record(), ttl_seconds=3600)
        clock.advance(3601)
        assert cache.get(KEY) is None

    def test_default_ttl_is_one_hour(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = ReleaseCache(store, clock=clock)
        cache.put(KEY, _record())
        entry = cache.entry(KEY)
        assert entry is not None
        assert entry.ttl_seconds == 3600

    def test_hit_does_not_extend_lifetime(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = ReleaseCache(store, clock=clock)
        cache.put(KEY, _record())
        clock.advance(3000)
        assert cache.get(KEY) is not None
        clock.advance(601)
        assert cache.get(KEY) is None


class TestPutAndInvalidate:
    def test_missing_key_is_miss(self, store: MemoryStore) -> None:
        assert ReleaseCache(store).get(KEY) is None

    def test_put_replaces_entry(self, store: MemoryStore, clock: FakeClock) -> None:
        cache = ReleaseCache(store, clock=clock)
        cache.put(KEY, _record("1.1.0"))
        clock.advance(10)
        cache.put(KEY, _record("1.2.0"))
        entry = cache.entry(KEY)
        assert entry is not None
        assert entry.record.version == "1.2.0"
        assert entry.stored_at == clock.now

    def test_invalidate_removes_fresh_entry(self, store: MemoryStore) -> None:
        cache = ReleaseCache(store)
        cache.put(KEY, _record())
        cache.invalidate(KEY)
        assert cache.get(KEY) is None
        assert store.get(KEY) is None

    def test_invalidate_missing_key_is_noop(self, store: MemoryStore) -> None:
        ReleaseCache(store).invalidate(KEY)

    def test_invalid_record_is_never_cached(self, store: MemoryStore) -> None:
        cache = ReleaseCache(store)
        bad = ReleaseRecord(version="", source_url="", download_url="https://example.com/x.zip")
        with pytest.raises(ValueError):
            cache.put(KEY, bad)
        assert store.get(KEY) is None

    def test_record_without_download_url_is_never_cached(self, store: MemoryStore) -> None:
        cache = ReleaseCache(store)
        with pytest.raises(ValueError):
            cache.put(KEY, ReleaseRecord(version="1.1.0", source_url="", download_url=""))


class TestCorruptEntries:
    def test_garbage_value_is_miss(self, store: MemoryStore) -> None:
        store.set(KEY, "not an entry")
        assert ReleaseCache(store).get(KEY) is None

    def test_entry_with_invalid_record_is_miss(self, store: MemoryStore, clock: FakeClock) -> None:
        store.set(
            KEY,
            {
                "record": {"version": "", "download_url": "https://example.com/x.zip"},
                "stored_at": clock.now,
                "ttl_seconds": 3600,
            },
        )
        assert ReleaseCache(store, clock=clock).get(KEY) is None

    def test_entry_round_trip(self, clock: FakeClock) -> None:
        entry = CacheEntry(record=_record(), stored_at=clock.now, ttl_seconds=3600)
        assert CacheEntry.from_dict(entry.to_dict()) == entry
