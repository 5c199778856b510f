"""Host option store backends."""

from plugin_updater.core.store.kv import KeyValueStore, MemoryStore, SqliteStore

__all__ = ["KeyValueStore", "MemoryStore", "SqliteStore"]
