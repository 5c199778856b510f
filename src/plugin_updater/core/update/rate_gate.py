"""Minimum-interval gate for remote release checks.

Persists ``RateLimitState`` in the host option store so the gate survives
process restarts.  Independent of the release cache: the cache TTL bounds
steady-state traffic, this gate bounds retries after eviction or restart.

The read-check-write sequence is not atomic across processes.  Concurrent
callers may both pass the gate inside one window; that bounded race is
accepted.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from plugin_updater.core.constants import CHECK_INTERVAL_SECONDS, LAST_CHECK_OPTION
from plugin_updater.core.store.kv import KeyValueStore
from plugin_updater.core.update.models import RateLimitState

logger = structlog.get_logger()


class RateGate:
    """
    Args:
        store: Host option store holding the last-check timestamp.
        interval_seconds: Minimum gap between two attempts.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        interval_seconds: int = CHECK_INTERVAL_SECONDS,
        option_key: str = LAST_CHECK_OPTION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self.interval_seconds = interval_seconds
        self._key = option_key
        self._clock = clock

    def state(self) -> RateLimitState:
        raw = self._store.get(self._key, 0)
        if not isinstance(raw, (int, float)) or isinstance(raw, bool):
            logger.warning("rate_gate_state_corrupt", key=self._key)
            return RateLimitState()
        return RateLimitState(last_check_at=float(raw))

    def retry_in(self) -> float:
        """Seconds until the gate opens; 0 when an attempt is allowed now."""
        elapsed = self._clock() - self.state().last_check_at
        return max(0.0, self.interval_seconds - elapsed)

    def allows(self) -> bool:
        return self.retry_in() <= 0

    def record_attempt(self) -> None:
        self._store.set(self._key, self._clock())

    def reset(self) -> None:
        self._store.delete(self._key)
