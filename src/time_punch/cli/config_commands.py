"""CLI command for inspecting the resolved configuration."""

import json

import click  # type: ignore[import-not-found]
from rich.console import Console  # type: ignore[import-not-found]
from rich.markup import escape  # type: ignore[import-not-found]
from rich.table import Table  # type: ignore[import-not-found]

console = Console()


@click.command("config")  # type: ignore[misc]
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_command(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved configuration.

    Settings come from ~/.config/time-punch/config.yml (or $TIME_CONFIG_FILE),
    overridden by TIME_* environment variables.

    Example:
        tt config
        tt config --json
    """
    settings = ctx.obj["config"].to_dict()

    if as_json:
        print(json.dumps(settings, indent=2))
        return

    table = Table(title="Time Punch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.items():
        table.add_row(key, escape(str(value)) if value is not None else "-")

    console.print(table)
