"""
plugin-updater — self-update checker for the Rank Math API Manager plugin.

plugin-updater asks the GitHub releases API whether a newer version of the
plugin exists, caches what it learns, and hands the answer to the host's
update manager and "View details" modal. It never installs anything.

Package layout (src/plugin_updater/):
  core/update/  — fetcher, cache, rate gate, comparator, decision engine, info
  core/store/   — key-value persistence (memory, SQLite)
  host/         — host-facing service object and hook descriptors
  cli/          — Click CLI entry point
"""

__version__ = "1.0.8"
__all__ = ["__version__"]
