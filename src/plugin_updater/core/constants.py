"""plugin-updater constants: filesystem layout, release stream, timeouts, and limits."""

from __future__ import annotations

import os
import sys
from enum import IntEnum
from pathlib import Path

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    NETWORK_ERROR = 4
    UPDATE_AVAILABLE = 10


# ---------------------------------------------------------------------------
# Platform-specific data directory
# ---------------------------------------------------------------------------


def _default_data_dir() -> Path:
    """
    Return the platform-appropriate plugin-updater data directory.

    macOS : ~/Library/Application Support/plugin-updater
    Linux : ~/.config/plugin-updater
    Other : ~/.plugin-updater
    """
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "plugin-updater"
    if sys.platform.startswith("linux"):
        xdg = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
        return xdg / "plugin-updater"
    return Path.home() / ".plugin-updater"


# ---------------------------------------------------------------------------
# Filesystem layout
# ---------------------------------------------------------------------------

CONFIG_FILENAME = "config.toml"
DB_FILENAME = "plugin-updater.db"

# ---------------------------------------------------------------------------
# Tracked release stream
# ---------------------------------------------------------------------------

GITHUB_OWNER = "devora-as"
GITHUB_REPO = "rank-math-api-manager"
GITHUB_ACCEPT = "application/vnd.github.v3+json"
PACKAGE_FILENAME = "rank-math-api-manager.zip"

PLUGIN_SLUG = "rank-math-api-manager"
PLUGIN_BASENAME = "rank-math-api-manager/rank-math-api-manager.php"
PLUGIN_VERSION = "1.0.8"

# ---------------------------------------------------------------------------
# Persisted option keys (host key-value store)
# ---------------------------------------------------------------------------

RELEASE_CACHE_KEY = "rank_math_api_github_release"
LAST_CHECK_OPTION = "rank_math_api_last_github_check"
TOKEN_OPTION = "rank_math_api_github_token"
ACTIVATED_OPTION = "rank_math_api_activated"

# ---------------------------------------------------------------------------
# Timeouts and limits
# ---------------------------------------------------------------------------

CACHE_TTL_SECONDS = 3600  # 1 hour: release cache freshness
CHECK_INTERVAL_SECONDS = 300  # 5 minutes: minimum gap between remote attempts
HTTP_TIMEOUT_SECONDS = 15
