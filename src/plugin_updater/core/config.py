"""plugin-updater configuration: Pydantic model, load, save, and token resolution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, Field, SecretStr, field_validator

from plugin_updater.core.constants import (
    CACHE_TTL_SECONDS,
    CHECK_INTERVAL_SECONDS,
    CONFIG_FILENAME,
    DB_FILENAME,
    GITHUB_OWNER,
    GITHUB_REPO,
    HTTP_TIMEOUT_SECONDS,
    PACKAGE_FILENAME,
    PLUGIN_BASENAME,
    PLUGIN_SLUG,
    PLUGIN_VERSION,
    TOKEN_OPTION,
    _default_data_dir,
)
from plugin_updater.core.exceptions import ConfigError, ConfigNotFoundError
from plugin_updater.core.store.kv import KeyValueStore
from plugin_updater.core.update.models import AuthConfig


def data_dir() -> Path:
    """Return the plugin-updater data directory, creating it if needed."""
    d = _default_data_dir()
    d.mkdir(mode=0o700, parents=True, exist_ok=True)
    return d


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class GitHubConfig(BaseModel):
    owner: str = GITHUB_OWNER
    repo: str = GITHUB_REPO
    api_url: str = ""  # empty → derived from owner/repo
    package_filename: str = PACKAGE_FILENAME
    token: SecretStr | None = None

    @property
    def releases_url(self) -> str:
        if self.api_url:
            return self.api_url
        return f"https://api.github.com/repos/{self.owner}/{self.repo}/releases/latest"

    @field_validator("token", mode="before")
    @classmethod
    def blank_token_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class UpdateConfig(BaseModel):
    cache_ttl_seconds: int = CACHE_TTL_SECONDS
    check_interval_seconds: int = CHECK_INTERVAL_SECONDS
    timeout_seconds: float = HTTP_TIMEOUT_SECONDS

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if not (60 <= v <= 86_400):
            raise ValueError("cache_ttl_seconds must be between 60 and 86400")
        return v

    @field_validator("check_interval_seconds")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if not (60 <= v <= 86_400):
            raise ValueError("check_interval_seconds must be between 60 and 86400")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if not (1.0 <= v <= 60.0):
            raise ValueError("timeout_seconds must be between 1 and 60")
        return v


class PluginConfig(BaseModel):
    """Static metadata reported to the host's update manager and details modal."""

    name: str = "Rank Math API Manager"
    slug: str = PLUGIN_SLUG
    basename: str = PLUGIN_BASENAME
    version: str = PLUGIN_VERSION
    plugin_uri: str = "https://devora.no/plugins/rankmath-api-manager"
    author: str = "Devora AS"
    author_uri: str = "https://devora.no"
    description: str = (
        "A WordPress extension that manages the update of Rank Math metadata "
        "(SEO Title, SEO Description, Canonical URL, Focus Keyword) via the REST API "
        "for WordPress posts and WooCommerce products."
    )
    requires: str = "5.0"
    tested: str = "6.4"
    requires_php: str = "7.4"


class HostConfig(BaseModel):
    name: str = "WordPress"
    version: str = "6.4"
    url: str = ""

    @property
    def user_agent(self) -> str:
        """``Name/version; url``, the URL in ASCII form (IDNA host, encoded path).

        HTTP header values must be ASCII; an unparseable URL is left out.
        """
        product = f"{self.name}/{self.version}"
        if not self.url:
            return product
        try:
            site = str(httpx.URL(self.url.strip()))
        except (httpx.InvalidURL, UnicodeError):
            return product
        return f"{product}; {site}" if site.isascii() else product


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: str = "text"  # "text" | "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v


class StoreConfig(BaseModel):
    path: str = ""  # empty → use default


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class UpdaterConfig(BaseModel):
    """Root plugin-updater configuration model."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    update: UpdateConfig = Field(default_factory=UpdateConfig)
    plugin: PluginConfig = Field(default_factory=PluginConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    _config_path: Path | None = None

    @property
    def db_path(self) -> Path:
        if self.store.path:
            return Path(self.store.path).expanduser()
        return data_dir() / DB_FILENAME

    @property
    def static_token(self) -> str | None:
        if self.github.token is None:
            return None
        return self.github.token.get_secret_value() or None


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def _config_file_path() -> Path:
    if env_path := os.environ.get("PLUGIN_UPDATER_CONFIG"):
        return Path(env_path)
    return _default_data_dir() / CONFIG_FILENAME


def load_config(path: Path | str | None = None) -> UpdaterConfig:
    """
    Load UpdaterConfig from TOML, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (PLUGIN_UPDATER_*)
      2. Config file
      3. Built-in defaults

    An explicit *path* that does not exist raises ConfigNotFoundError; a
    missing default config file simply yields the defaults.
    """
    import tomllib

    explicit = path is not None or bool(os.environ.get("PLUGIN_UPDATER_CONFIG"))
    cfg_path = Path(path) if path is not None else _config_file_path()

    data: dict[str, Any] = {}
    if cfg_path.exists():
        try:
            with open(cfg_path, "rb") as f:
                data = tomllib.load(f)
        except Exception as exc:
            raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc
    elif explicit:
        raise ConfigNotFoundError(f"Config file not found: {cfg_path}")

    _resolve_keyring_placeholders(data)
    _apply_env_overrides(data)

    try:
        config = UpdaterConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config at {cfg_path}: {exc}") from exc

    config._config_path = cfg_path if cfg_path.exists() else None
    return config


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay PLUGIN_UPDATER_* environment variables onto parsed TOML."""

    def _env(name: str) -> str:
        return os.environ.get(name, "")

    if token := _env("PLUGIN_UPDATER_GITHUB_TOKEN"):
        data.setdefault("github", {})["token"] = token
    if api_url := _env("PLUGIN_UPDATER_API_URL"):
        data.setdefault("github", {})["api_url"] = api_url
    if level := _env("PLUGIN_UPDATER_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level
    if db := _env("PLUGIN_UPDATER_DB_PATH"):
        data.setdefault("store", {})["path"] = db
    if host_url := _env("PLUGIN_UPDATER_HOST_URL"):
        data.setdefault("host", {})["url"] = host_url


def save_config(
    config_data: dict[str, Any],
    path: Path | None = None,
    *,
    use_keyring: bool = False,
) -> Path:
    """Write config dict to TOML file with secure permissions (0600)."""
    import copy

    import tomli_w

    cfg_path = path or _config_file_path()
    cfg_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    write_data = config_data
    if use_keyring:
        write_data = copy.deepcopy(config_data)
        _store_token_in_keyring(write_data)

    tmp_path = cfg_path.with_suffix(".tmp")
    try:
        with open(tmp_path, "wb") as f:
            tomli_w.dump(write_data, f)
        tmp_path.replace(cfg_path)
    except Exception as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Cannot write config to {cfg_path}: {exc}") from exc

    cfg_path.chmod(0o600)
    return cfg_path


# ---------------------------------------------------------------------------
# Keyring helpers
# ---------------------------------------------------------------------------


def _store_token_in_keyring(data: dict[str, Any]) -> None:
    from plugin_updater.core.keyring_store import is_keyring_placeholder, store_token

    github = data.get("github")
    if not isinstance(github, dict):
        return
    token = github.get("token")
    if isinstance(token, str) and token and not is_keyring_placeholder(token):
        github["token"] = store_token(token)


def _resolve_keyring_placeholders(data: dict[str, Any]) -> None:
    from plugin_updater.core.keyring_store import is_keyring_placeholder, resolve_token_option

    github = data.get("github")
    if not isinstance(github, dict):
        return
    token = github.get("token")
    if is_keyring_placeholder(token):
        github["token"] = resolve_token_option(token)


# ---------------------------------------------------------------------------
# Auth resolution
# ---------------------------------------------------------------------------


def resolve_auth(config: UpdaterConfig, store: KeyValueStore) -> AuthConfig:
    """
    Resolve the GitHub token.

    Precedence:
      1. Token option persisted in the host store
      2. Static configuration (config file / PLUGIN_UPDATER_GITHUB_TOKEN)
      3. None, i.e. unauthenticated requests (60/hour at GitHub)
    """
    from plugin_updater.core.keyring_store import resolve_token_option

    stored = resolve_token_option(store.get(TOKEN_OPTION))
    if stored:
        return AuthConfig(token=stored)
    return AuthConfig(token=config.static_token)
