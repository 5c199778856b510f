"""``check`` and ``info`` commands."""

from __future__ import annotations

import json

import click
from rich.console import Console

from plugin_updater.cli._common import open_service
from plugin_updater.core.constants import ExitCode
from plugin_updater.core.update.models import UpdateAvailable

console = Console()


@click.command()
@click.option("--current", default=None, help="Installed version (default: configured version).")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.option(
    "--exit-code",
    is_flag=True,
    default=False,
    help=f"Exit with status {int(ExitCode.UPDATE_AVAILABLE)} when an update is available.",
)
@click.pass_context
def check_cmd(ctx: click.Context, current: str | None, as_json: bool, exit_code: bool) -> None:
    """Check whether a newer release is available."""
    with open_service(ctx) as service:
        current_version = current or service.config.plugin.version
        status = service.check_for_update(current_version)

    if as_json:
        data: dict = {"current_version": current_version, "update_available": False}
        if isinstance(status, UpdateAvailable):
            data["update_available"] = True
            data["release"] = status.record.to_dict()
        click.echo(json.dumps(data, indent=2))
    elif isinstance(status, UpdateAvailable):
        console.print(
            f"[yellow]Update available:[/yellow] {current_version} → {status.record.version}"
        )
        console.print(f"  Release:  {status.record.source_url}")
        console.print(f"  Package:  {status.record.download_url}")
    else:
        console.print(f"[green]Up to date[/green] ({current_version})")

    if exit_code and isinstance(status, UpdateAvailable):
        raise SystemExit(ExitCode.UPDATE_AVAILABLE)


@click.command()
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def info_cmd(ctx: click.Context, as_json: bool) -> None:
    """Show release details and the sanitized changelog."""
    with open_service(ctx) as service:
        details = service.describe()

    if details is None:
        if as_json:
            click.echo(json.dumps(None))
        else:
            console.print("[dim]No release information available right now.[/dim]")
        raise SystemExit(ExitCode.NETWORK_ERROR)

    if as_json:
        click.echo(json.dumps(details.to_dict(), indent=2))
        return

    console.print(f"Version:    {details.version}")
    console.print(f"Published:  {details.published_at or 'unknown'}")
    console.print(f"Release:    {details.source_url}")
    console.print(f"Package:    {details.download_url}")
    if details.changelog:
        console.print("\nChangelog:")
        console.print(details.changelog, markup=False, highlight=False)
