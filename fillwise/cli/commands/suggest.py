"""Show the suggestions offered for one field of a scenario."""
from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ..scenario import load_scenario

console = Console()


@click.command(name="suggest")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--field", "field_name", required=True, help="Name of the live field being queried")
@click.option("--prefix", default=None, help="Override the text already typed into the field")
def suggest_command(scenario: Path, field_name: str, prefix: str | None):
    """
    List suggestions for FIELD in a SCENARIO file.

    Examples:

      fillwise suggest checkout.json --field cardnumber
    """
    loaded = load_scenario(scenario)
    manager = loaded.build_manager()
    live_field = loaded.live_field(field_name)
    if prefix is not None:
        live_field.value = prefix

    suggestions = manager.query_suggestions(loaded.live_form, live_field)
    if not suggestions:
        console.print(f"[yellow]No suggestions for[/yellow] [cyan]{field_name}[/cyan]")
        return

    table = Table(title=f"Suggestions for {field_name}", border_style="cyan", header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Value", style="yellow")
    table.add_column("Label")
    table.add_column("Icon", style="magenta")
    table.add_column("ID", justify="right", style="green")
    for index, suggestion in enumerate(suggestions):
        table.add_row(str(index), suggestion.value, suggestion.label, suggestion.icon, str(suggestion.unique_id))
    console.print(table)
