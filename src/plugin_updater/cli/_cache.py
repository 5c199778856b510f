"""``cache`` command group."""

from __future__ import annotations

import click
from rich.console import Console

from plugin_updater.cli._common import open_service

console = Console()


@click.group()
def cache_group() -> None:
    """Manage the cached release and the rate-gate timestamp."""


@cache_group.command("clear")
@click.pass_context
def cache_clear(ctx: click.Context) -> None:
    """Forget the cached release so the next check goes to GitHub."""
    with open_service(ctx) as service:
        service.clear_cache()
    console.print("[green]Release cache cleared.[/green]")


@cache_group.command("show")
@click.pass_context
def cache_show(ctx: click.Context) -> None:
    """Show the cached release entry and when the next remote check is allowed."""
    with open_service(ctx) as service:
        entry = service.cache.entry(service.source.cache_key)
        retry_in = service.gate.retry_in()

    if entry is None:
        console.print("[dim]No cached release.[/dim]")
    else:
        console.print(f"Cached version: {entry.record.version}")
        console.print(f"Stored at:      {entry.stored_at:.0f} (ttl {entry.ttl_seconds}s)")
    if retry_in > 0:
        console.print(f"Next remote check allowed in {retry_in:.0f}s")
    else:
        console.print("Remote check allowed now")
