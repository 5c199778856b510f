"""
plugin-updater CLI entry point.

Commands:
  plugin-updater check [--current V]  — is a newer release available?
  plugin-updater info                 — release details and sanitized changelog
  plugin-updater cache clear          — drop the release cache and rate-gate state
  plugin-updater cache show           — cached release and rate-gate status
  plugin-updater token set <value>    — persist a GitHub token in the option store
  plugin-updater token clear          — remove the persisted token
  plugin-updater version              — show version information
"""

from __future__ import annotations

from pathlib import Path

import click

from plugin_updater import __version__
from plugin_updater.cli._cache import cache_group
from plugin_updater.cli._check import check_cmd, info_cmd
from plugin_updater.cli._token import token_group
from plugin_updater.cli._version import version_cmd


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="plugin-updater %(version)s")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to config.toml (default: platform data directory).",
)
@click.option(
    "--log-level", default=None, hidden=True, help="Log level for structured logging."
)
@click.option("--log-json", is_flag=True, default=False, hidden=True, help="Emit JSON log lines.")
@click.pass_context
def cli(
    ctx: click.Context, config_path: Path | None, log_level: str | None, log_json: bool
) -> None:
    """plugin-updater — release checks for the Rank Math API Manager plugin."""
    from plugin_updater.core.logging import configure_logging

    configure_logging(level=log_level or "WARNING", json_output=log_json)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_override"] = log_level is not None or log_json


cli.add_command(check_cmd, "check")
cli.add_command(info_cmd, "info")
cli.add_command(cache_group, "cache")
cli.add_command(token_group, "token")
cli.add_command(version_cmd, "version")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
