"""Time-bounded release cache over the host option store.

Entries are stored whole (record + stored_at + ttl) under one key and are
replaced, never patched.  A hit does not extend the entry's lifetime: an
entry expires ``ttl_seconds`` after the fetch that produced it.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from plugin_updater.core.constants import CACHE_TTL_SECONDS
from plugin_updater.core.store.kv import KeyValueStore
from plugin_updater.core.update.models import CacheEntry, ReleaseRecord

logger = structlog.get_logger()


class ReleaseCache:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        default_ttl: int = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self.default_ttl = default_ttl
        self._clock = clock

    def entry(self, key: str) -> CacheEntry | None:
        """Return the stored entry for *key* regardless of freshness."""
        raw = self._store.get(key)
        if raw is None:
            return None
        entry = CacheEntry.from_dict(raw)
        if entry is None:
            logger.warning("release_cache_entry_corrupt", key=key)
        return entry

    def get(self, key: str) -> ReleaseRecord | None:
        entry = self.entry(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            logger.debug("release_cache_expired", key=key, stored_at=entry.stored_at)
            return None
        return entry.record

    def put(self, key: str, record: ReleaseRecord, ttl_seconds: int | None = None) -> None:
        if not record.is_valid():
            raise ValueError(f"refusing to cache invalid release record {record!r}")
        entry = CacheEntry(
            record=record,
            stored_at=self._clock(),
            ttl_seconds=self.default_ttl if ttl_seconds is None else ttl_seconds,
        )
        self._store.set(key, entry.to_dict())
        logger.debug("release_cached", key=key, version=record.version, ttl=entry.ttl_seconds)

    def invalidate(self, key: str) -> None:
        self._store.delete(key)
