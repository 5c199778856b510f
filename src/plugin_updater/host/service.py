"""
UpdateService — the one object a host owns and injects into its handlers.

Hooks:
  filter_update_plugins(state)       — host update-manager filter
  plugin_information(action, args)   — host "View details" filter

Lifecycle:
  activate()    — record the activation time
  deactivate()  — drop the release cache and the rate-gate timestamp
  uninstall()   — deactivate() plus forget the activation time

The token is resolved once, when the service is built.  ``set_token()``
persists a new value for the next service the host builds.
"""

from __future__ import annotations

import html
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

import httpx
import structlog

from plugin_updater.core.config import UpdaterConfig, resolve_auth
from plugin_updater.core.constants import (
    ACTIVATED_OPTION,
    RELEASE_CACHE_KEY,
    TOKEN_OPTION,
)
from plugin_updater.core.store.kv import KeyValueStore
from plugin_updater.core.update.cache import ReleaseCache
from plugin_updater.core.update.engine import ReleaseSource, UpdateDecisionEngine
from plugin_updater.core.update.fetcher import ReleaseFetcher
from plugin_updater.core.update.info import InfoProvider
from plugin_updater.core.update.models import DisplayInfo, UpdateAvailable, UpdateStatus
from plugin_updater.core.update.rate_gate import RateGate
from plugin_updater.host.descriptors import (
    PluginInformation,
    PluginUpdateState,
    UpdateDescriptor,
)

logger = structlog.get_logger()

PLUGIN_INFORMATION_ACTION = "plugin_information"


class UpdateService:
    def __init__(
        self,
        config: UpdaterConfig,
        store: KeyValueStore,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.store = store
        self._clock = clock

        self.auth = resolve_auth(config, store)
        self.gate = RateGate(
            store,
            interval_seconds=config.update.check_interval_seconds,
            clock=clock,
        )
        self.cache = ReleaseCache(store, default_ttl=config.update.cache_ttl_seconds, clock=clock)
        self.fetcher = ReleaseFetcher(
            self.gate,
            api_url=config.github.releases_url,
            auth=self.auth,
            user_agent=config.host.user_agent,
            package_filename=config.github.package_filename,
            timeout=config.update.timeout_seconds,
            transport=transport,
        )
        self.source = ReleaseSource(
            self.cache,
            self.fetcher,
            cache_key=RELEASE_CACHE_KEY,
            ttl_seconds=config.update.cache_ttl_seconds,
        )
        self.engine = UpdateDecisionEngine(self.source)
        self.info = InfoProvider(self.source)
        self._log = logger.bind(plugin=config.plugin.slug)

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def check_for_update(self, current_version: str | None = None) -> UpdateStatus:
        return self.engine.check_for_update(current_version or self.config.plugin.version)

    def describe(self) -> DisplayInfo | None:
        return self.info.describe()

    # ------------------------------------------------------------------
    # Host hooks
    # ------------------------------------------------------------------

    def filter_update_plugins(self, state: PluginUpdateState) -> PluginUpdateState:
        """Attach an UpdateDescriptor when a newer release exists.

        Only acts when the host is checking this plugin; the installed version
        comes from ``state.checked``.
        """
        basename = self.config.plugin.basename
        if not state.checked:
            self._log.debug("update_filter_skipped", reason="nothing_checked")
            return state
        if basename not in state.checked:
            self._log.debug("update_filter_skipped", reason="not_tracked", basename=basename)
            return state

        status = self.engine.check_for_update(state.checked[basename])
        if isinstance(status, UpdateAvailable):
            plugin = self.config.plugin
            state.response[basename] = UpdateDescriptor(
                slug=basename.split("/", 1)[0],
                plugin=basename,
                new_version=status.record.version,
                url=plugin.plugin_uri,
                package=status.record.download_url,
                tested=plugin.tested,
                requires_php=plugin.requires_php,
            )
            self._log.info("update_descriptor_attached", new_version=status.record.version)
        return state

    def plugin_information(self, action: str, args: object) -> PluginInformation | None:
        """Answer the details modal for this plugin; ``None`` for anything else."""
        if action != PLUGIN_INFORMATION_ACTION or _slug_of(args) != self.config.plugin.slug:
            return None

        details = self.info.describe()
        if details is None:
            return None

        plugin = self.config.plugin
        author = (
            f'<a href="{html.escape(plugin.author_uri, quote=True)}">'
            f"{html.escape(plugin.author)}</a>"
        )
        return PluginInformation(
            name=plugin.name,
            slug=plugin.slug,
            version=details.version,
            author=author,
            homepage=plugin.plugin_uri,
            requires=plugin.requires,
            tested=plugin.tested,
            requires_php=plugin.requires_php,
            last_updated=details.published_at,
            download_link=details.download_url,
            sections={
                "description": f"<p>{html.escape(plugin.description)}</p>",
                "changelog": details.changelog,
            },
        )

    # ------------------------------------------------------------------
    # Lifecycle and persisted configuration
    # ------------------------------------------------------------------

    def activate(self) -> None:
        self.store.set(ACTIVATED_OPTION, datetime.fromtimestamp(self._clock(), UTC).isoformat())
        self._log.info("plugin_activated")

    def clear_cache(self) -> None:
        """Drop the cached release and the rate-gate timestamp."""
        self.source.invalidate()
        self.gate.reset()
        self._log.info("release_cache_cleared")

    def deactivate(self) -> None:
        self.clear_cache()
        self._log.info("plugin_deactivated")

    def uninstall(self) -> None:
        self.deactivate()
        self.store.delete(ACTIVATED_OPTION)
        self._log.info("plugin_uninstalled")

    def set_token(self, token: str) -> None:
        self.store.set(TOKEN_OPTION, token)
        self._log.info("github_token_stored")

    def clear_token(self) -> None:
        self.store.delete(TOKEN_OPTION)
        self._log.info("github_token_cleared")


def _slug_of(args: object) -> str | None:
    if isinstance(args, Mapping):
        slug = args.get("slug")
    else:
        slug = getattr(args, "slug", None)
    return slug if isinstance(slug, str) else None
