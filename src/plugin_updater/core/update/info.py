"""Release details for the host's "View details" surface."""

from __future__ import annotations

import structlog

from plugin_updater.core.update.engine import ReleaseSource
from plugin_updater.core.update.models import DisplayInfo, FetchError
from plugin_updater.core.update.sanitize import format_changelog

logger = structlog.get_logger()


class InfoProvider:
    def __init__(self, source: ReleaseSource) -> None:
        self.source = source

    def describe(self) -> DisplayInfo | None:
        """Display info for the tracked release, or ``None`` if none is obtainable.

        Shares the engine's miss handling, so a first details view also primes
        the cache.
        """
        result = self.source.obtain()
        if isinstance(result, FetchError):
            logger.info("release_details_unavailable", kind=str(result.kind))
            return None
        return DisplayInfo(
            version=result.version,
            published_at=result.published_at,
            source_url=result.source_url,
            download_url=result.download_url,
            changelog=format_changelog(result.description),
        )
