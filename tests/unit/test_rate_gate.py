"""Unit tests for the minimum-interval rate gate."""

from __future__ import annotations

from release_fakes import FakeClock

from plugin_updater.core.constants import LAST_CHECK_OPTION
from plugin_updater.core.store.kv import MemoryStore
from plugin_updater.core.update.rate_gate import RateGate


class TestRateGate:
    def test_never_checked_allows(self, store: MemoryStore, clock: FakeClock) -> None:
        gate = RateGate(store, clock=clock)
        assert gate.state().last_check_at == 0.0
        assert gate.allows() is True

    def test_blocks_inside_window(self, store: MemoryStore, clock: FakeClock) -> None:
        store.set(LAST_CHECK_OPTION, clock.now - 299)
        gate = RateGate(store, clock=clock)
        assert gate.allows() is False
        assert gate.retry_in() == 1

    def test_allows_after_window(self, store: MemoryStore, clock: FakeClock) -> None:
        store.set(LAST_CHECK_OPTION, clock.now - 301)
        assert RateGate(store, clock=clock).allows() is True

    def test_allows_exactly_at_interval(self, store: MemoryStore, clock: FakeClock) -> None:
        store.set(LAST_CHECK_OPTION, clock.now - 300)
        assert RateGate(store, clock=clock).allows() is True

    def test_record_attempt_persists_now(self, store: MemoryStore, clock: FakeClock) -> None:
        gate = RateGate(store, clock=clock)
        gate.record_attempt()
        assert store.get(LAST_CHECK_OPTION) == clock.now
        assert gate.allows() is False

    def test_state_survives_new_gate_instance(self, store: MemoryStore, clock: FakeClock) -> None:
        RateGate(store, clock=clock).record_attempt()
        assert RateGate(store, clock=clock).allows() is False

    def test_custom_interval(self, store: MemoryStore, clock: FakeClock) -> None:
        gate = RateGate(store, interval_seconds=60, clock=clock)
        gate.record_attempt()
        clock.advance(61)
        assert gate.allows() is True

    def test_reset_reopens_gate(self, store: MemoryStore, clock: FakeClock) -> None:
        gate = RateGate(store, clock=clock)
        gate.record_attempt()
        gate.reset()
        assert gate.allows() is True

    def test_corrupt_state_treated_as_never_checked(
        self, store: MemoryStore, clock: FakeClock
    ) -> None:
        store.set(LAST_CHECK_OPTION, "yesterday")
        assert RateGate(store, clock=clock).allows() is True
