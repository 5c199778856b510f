"""Shared CLI plumbing: load config, open the option store, build the service."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click
from rich.console import Console

from plugin_updater.core.constants import ExitCode
from plugin_updater.core.exceptions import ConfigError, StoreError

err_console = Console(stderr=True)


@contextmanager
def open_service(ctx: click.Context) -> Iterator:
    """Yield an UpdateService backed by the configured SQLite option store."""
    from plugin_updater.core.config import load_config
    from plugin_updater.core.store.kv import SqliteStore
    from plugin_updater.host.service import UpdateService

    config_path = (ctx.obj or {}).get("config_path")
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc

    if not (ctx.obj or {}).get("log_override"):
        from plugin_updater.core.logging import configure_logging

        configure_logging(
            level=config.logging.level, json_output=config.logging.format == "json"
        )

    store = SqliteStore(config.db_path)
    try:
        store.connect()
    except StoreError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(ExitCode.ERROR) from exc
    try:
        yield UpdateService(config, store)
    finally:
        store.close()
