"""Update-check subsystem: fetch, cache, gate, compare, decide, describe."""

from plugin_updater.core.update.cache import ReleaseCache
from plugin_updater.core.update.engine import ReleaseSource, UpdateDecisionEngine
from plugin_updater.core.update.fetcher import ReleaseFetcher
from plugin_updater.core.update.info import InfoProvider
from plugin_updater.core.update.models import (
    AuthConfig,
    DisplayInfo,
    FetchError,
    FetchErrorKind,
    FetchResult,
    ReleaseRecord,
    UpdateAvailable,
    UpdateStatus,
    UpToDate,
)
from plugin_updater.core.update.rate_gate import RateGate
from plugin_updater.core.update.version import Ordering, compare_versions, is_newer

__all__ = [
    "AuthConfig",
    "DisplayInfo",
    "FetchError",
    "FetchErrorKind",
    "FetchResult",
    "InfoProvider",
    "Ordering",
    "RateGate",
    "ReleaseCache",
    "ReleaseFetcher",
    "ReleaseRecord",
    "ReleaseSource",
    "UpToDate",
    "UpdateAvailable",
    "UpdateDecisionEngine",
    "UpdateStatus",
    "compare_versions",
    "is_newer",
]
