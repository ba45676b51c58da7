"""Main Typer application — registers all CLI commands.

Entry point: ``multiout`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from multiout.cli.commands.handle import handle_cmd
from multiout.cli.commands.route import route_cmd

app = typer.Typer(
    name="multiout",
    help="multiout: copy changed storage objects to every matching output.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="handle", help="Run the handler on an event payload.")(handle_cmd)
app.command(name="route", help="Show which outputs an event would reach.")(route_cmd)


@app.command(name="check-config", help="Validate a routing configuration document.")
def check_config_cmd(
    config_path: Path = typer.Argument(..., help="Path to the configuration document."),
) -> None:
    """Validate a configuration document and list its providers and rules."""
    from multiout.core.config_loader import InvalidConfigError, load_config_file

    console = Console()
    try:
        config = load_config_file(config_path)
    except InvalidConfigError as exc:
        console.print(f"[bold red]Invalid configuration:[/bold red] {exc}")
        raise typer.Exit(code=1)

    providers = Table(title="Storage providers")
    providers.add_column("Name", style="cyan")
    providers.add_column("Type", style="green")
    providers.add_column("Endpoint")
    for provider in config.storage_providers.values():
        providers.add_row(provider.name, provider.type, provider.auth.endpoint or "[dim]default[/dim]")
    console.print(providers)

    rules = Table(title="Output rules")
    rules.add_column("Storage", style="cyan")
    rules.add_column("Path")
    rules.add_column("Prefix")
    rules.add_column("Suffix")
    for rule in config.outputs:
        name = rule.storage_name
        if name not in config.storage_providers:
            name = f"{name} [red](unknown)[/red]"
        rules.add_row(name, rule.path, ", ".join(rule.prefix), ", ".join(rule.suffix))
    console.print(rules)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
