"""plugin-updater exception hierarchy.

Release fetch failures are not exceptions: they travel as ``FetchError``
values (see ``plugin_updater.core.update.models``).
"""

from __future__ import annotations


class PluginUpdaterError(Exception):
    """Base exception for all plugin-updater errors."""


class ConfigError(PluginUpdaterError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""


class StoreError(PluginUpdaterError):
    """Raised when the key-value store cannot be read or written."""
