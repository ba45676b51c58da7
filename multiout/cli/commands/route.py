"""``multiout route PAYLOAD`` — dry-run the routing decision for an event.

Normalizes the payload, evaluates every output rule, and shows which
destinations would receive the object.  Nothing is downloaded or uploaded.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from multiout.cli.commands._payload import read_payload
from multiout.core.config_loader import InvalidConfigError, load_config_file
from multiout.core.event_normalizer import InvalidEventError, normalize
from multiout.core.router import compute_destinations, rule_matches

console = Console()


def route_cmd(
    payload: str = typer.Argument(
        ...,
        help="Path to the event payload JSON, or '-' for stdin.",
    ),
    config_path: Path = typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to the routing configuration document.",
    ),
) -> None:
    """Show which outputs an event would be copied to."""
    try:
        config = load_config_file(config_path)
        event = normalize(read_payload(payload))
    except (InvalidConfigError, InvalidEventError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(
        f"[bold]{event.event_source.value}[/bold] event for "
        f"[cyan]{event.path}[/cyan] at {event.event_time}"
    )

    table = Table(title="Output rules", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Storage")
    table.add_column("Path")
    table.add_column("Prefix")
    table.add_column("Suffix")
    table.add_column("Match", justify="center")

    for index, rule in enumerate(config.outputs, start=1):
        matched = rule_matches(rule, event.object_key)
        table.add_row(
            str(index),
            rule.storage_name,
            rule.path,
            ", ".join(rule.prefix) or "[dim]any[/dim]",
            ", ".join(rule.suffix) or "[dim]any[/dim]",
            "[green]Yes[/green]" if matched else "[dim]No[/dim]",
        )
    console.print(table)

    destinations = compute_destinations(event, config.outputs)
    if not destinations:
        console.print("[yellow]No output matches this event.[/yellow]")
        return

    file_name = event.object_key.rsplit("/", 1)[-1]
    for name, path in destinations.items():
        known = name in config.storage_providers
        marker = "" if known else " [red](provider not configured)[/red]"
        console.print(f"  [cyan]{name}[/cyan] -> {path}/{file_name}{marker}")
