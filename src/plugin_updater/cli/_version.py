"""Version information CLI command."""

from __future__ import annotations

import click
from rich.console import Console

from plugin_updater import __version__

console = Console()


@click.command()
@click.option("--json", "as_json", is_flag=True, default=False)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Show install path and data paths",
)
def version_cmd(as_json: bool, verbose: bool) -> None:
    """Show version information."""
    import importlib.util
    import platform
    import sys as _sys

    spec = importlib.util.find_spec("plugin_updater")
    install_path = str(spec.origin) if spec and spec.origin else "unknown"

    try:
        from plugin_updater.core.constants import CONFIG_FILENAME, DB_FILENAME, _default_data_dir

        config_path = str(_default_data_dir() / CONFIG_FILENAME)
        db_path = str(_default_data_dir() / DB_FILENAME)
    except Exception:  # noqa: BLE001
        config_path = db_path = "unknown"

    if as_json:
        import json

        data: dict = {
            "plugin_updater": __version__,
            "python": _sys.version.split()[0],
            "platform": _sys.platform,
            "arch": platform.machine(),
        }
        if verbose:
            data["install_path"] = install_path
            data["config_path"] = config_path
            data["db_path"] = db_path
        click.echo(json.dumps(data, indent=2))
    else:
        console.print(f"plugin-updater {__version__}")
        console.print(f"Python {_sys.version.split()[0]}")
        console.print(f"Platform: {_sys.platform} {platform.machine()}")
        if verbose:
            console.print(f"Install:  {install_path}")
            console.print(f"Config:   {config_path}")
            console.print(f"Store:    {db_path}")
