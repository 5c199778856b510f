"""Shared fixtures for update-check unit tests."""

from __future__ import annotations

import pytest
from release_fakes import FakeClock

from plugin_updater.core.store.kv import MemoryStore


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()
