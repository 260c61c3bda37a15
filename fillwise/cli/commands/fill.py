"""Fill a scenario's form from one of the offered suggestions."""
from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ...fill.suggestions import WARNING_ID
from ..scenario import load_scenario

console = Console()


@click.command(name="fill")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--field", "field_name", required=True, help="Name of the live field that initiated the fill")
@click.option("--suggestion", "suggestion_index", type=int, default=0, show_default=True, help="Index of the suggestion to accept")
@click.option("--json", "as_json", is_flag=True, help="Print the filled form as JSON")
def fill_command(scenario: Path, field_name: str, suggestion_index: int, as_json: bool):
    """
    Accept a suggestion for FIELD and show the filled form.
    """
    loaded = load_scenario(scenario)
    manager = loaded.build_manager()
    live_field = loaded.live_field(field_name)

    suggestions = manager.query_suggestions(loaded.live_form, live_field)
    if not suggestions or not 0 <= suggestion_index < len(suggestions):
        console.print(f"[red]Error:[/red] no suggestion #{suggestion_index} for [cyan]{field_name}[/cyan]")
        raise SystemExit(1)
    unique_id = suggestions.unique_ids[suggestion_index]
    if unique_id == WARNING_ID:
        console.print(f"[yellow]{suggestions.values[suggestion_index]}[/yellow]")
        raise SystemExit(1)

    filled = manager.fill_form(loaded.live_form, live_field, unique_id)
    if filled is None:
        console.print("[yellow]Nothing to fill[/yellow]")
        return

    if as_json:
        click.echo(json.dumps(filled.to_dict(), indent=2))
        return

    table = Table(title=f"Filled form {filled.name or '(unnamed)'}", border_style="green", header_style="bold green")
    table.add_column("Field", style="cyan")
    table.add_column("Before")
    table.add_column("After", style="yellow")
    table.add_column("Autofilled", justify="center")
    for before, after in zip(loaded.live_form.fields, filled.fields):
        table.add_row(after.name, before.value, after.value, "✓" if after.is_autofilled else "")
    console.print(table)
