"""
Update decision engine.

``ReleaseSource.obtain()`` is the single cache-then-fetch path:

  cache hit   → cached record (TTL untouched)
  cache miss  → fetcher; on success the record is cached before use
  fetch error → the FetchError is returned as-is (already logged)

``UpdateDecisionEngine.check_for_update(current)`` turns that into an
``UpdateStatus``.  Any failure degrades to ``UpToDate``: an update is only
reported with a valid record in hand.  Safe to call on every host poll; the
cache TTL and the rate gate bound remote traffic independently.
"""

from __future__ import annotations

import structlog

from plugin_updater.core.constants import CACHE_TTL_SECONDS, RELEASE_CACHE_KEY
from plugin_updater.core.exceptions import StoreError
from plugin_updater.core.update.cache import ReleaseCache
from plugin_updater.core.update.fetcher import ReleaseFetcher
from plugin_updater.core.update.models import (
    FetchError,
    FetchResult,
    UpdateAvailable,
    UpdateStatus,
    UpToDate,
)
from plugin_updater.core.update.version import is_newer

logger = structlog.get_logger()


class ReleaseSource:
    """Cache-first access to the tracked release."""

    def __init__(
        self,
        cache: ReleaseCache,
        fetcher: ReleaseFetcher,
        *,
        cache_key: str = RELEASE_CACHE_KEY,
        ttl_seconds: int = CACHE_TTL_SECONDS,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.cache_key = cache_key
        self.ttl_seconds = ttl_seconds

    def obtain(self) -> FetchResult:
        try:
            cached = self.cache.get(self.cache_key)
        except StoreError as exc:
            logger.warning("release_cache_read_failed", key=self.cache_key, error=str(exc))
            cached = None
        if cached is not None:
            logger.debug("release_cache_hit", key=self.cache_key, version=cached.version)
            return cached

        logger.debug("release_cache_miss", key=self.cache_key)
        try:
            result = self.fetcher.fetch()
        except StoreError as exc:
            # Gate state could not be read or stamped; treat like a transport failure.
            logger.warning("rate_gate_store_failed", error=str(exc))
            return FetchError.network(f"rate gate unavailable: {exc}")
        if isinstance(result, FetchError):
            return result

        try:
            self.cache.put(self.cache_key, result, self.ttl_seconds)
        except StoreError as exc:
            logger.warning("release_cache_write_failed", key=self.cache_key, error=str(exc))
        return result

    def invalidate(self) -> None:
        self.cache.invalidate(self.cache_key)


class UpdateDecisionEngine:
    def __init__(self, source: ReleaseSource) -> None:
        self.source = source

    def check_for_update(self, current_version: str) -> UpdateStatus:
        result = self.source.obtain()
        if isinstance(result, FetchError):
            logger.info(
                "update_check_unavailable",
                kind=str(result.kind),
                current_version=current_version,
            )
            return UpToDate()

        if is_newer(result.version, current_version):
            logger.info(
                "update_available",
                current_version=current_version,
                new_version=result.version,
            )
            return UpdateAvailable(result)
        return UpToDate()
