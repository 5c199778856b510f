"""``token`` command group — GitHub token in the option store."""

from __future__ import annotations

import click
from rich.console import Console

from plugin_updater.cli._common import err_console, open_service
from plugin_updater.core.constants import ExitCode

console = Console()


@click.group()
def token_group() -> None:
    """Manage the GitHub API token (raises the remote limit to 5000 requests/hour)."""


@token_group.command("set")
@click.argument("value")
@click.option(
    "--keyring",
    "use_keyring",
    is_flag=True,
    default=False,
    help="Keep the token in the OS keychain and store only a placeholder.",
)
@click.pass_context
def token_set(ctx: click.Context, value: str, use_keyring: bool) -> None:
    """Persist a GitHub token."""
    value = value.strip()
    if not value:
        err_console.print("[red]Error:[/red] token must not be empty.")
        raise SystemExit(ExitCode.ERROR)

    if use_keyring:
        from plugin_updater.core.keyring_store import is_keyring_available, store_token

        if not is_keyring_available():
            err_console.print("[red]Error:[/red] no usable keyring backend.")
            raise SystemExit(ExitCode.ERROR)
        value = store_token(value)

    with open_service(ctx) as service:
        service.set_token(value)
    console.print("[green]Token stored.[/green]")


@token_group.command("clear")
@click.pass_context
def token_clear(ctx: click.Context) -> None:
    """Remove the persisted GitHub token."""
    from plugin_updater.core.keyring_store import forget_token

    with open_service(ctx) as service:
        service.clear_token()
    forget_token()
    console.print("[green]Token removed.[/green]")
