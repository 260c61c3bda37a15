"""Show how a scenario's cached form splits into fill sections."""
from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ...errors import SectionBoundsError
from ...forms.sections import find_section_bounds
from ..scenario import load_scenario

console = Console()


@click.command(name="sections")
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def sections_command(scenario: Path):
    """
    Print the identity and payment section of every field in SCENARIO.
    """
    loaded = load_scenario(scenario)
    manager = loaded.build_manager()
    cached = manager.cache.find(loaded.live_form)
    if cached is None:
        console.print("[red]Error:[/red] the form was not cached (too few fields?)")
        raise SystemExit(1)

    table = Table(title="Sections", border_style="blue", header_style="bold blue")
    table.add_column("#", justify="right")
    table.add_column("Field", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Group")
    table.add_column("Section")

    for index, cached_field in enumerate(cached.fields):
        filling_payment = cached_field.field_type.is_payment
        try:
            start, end = find_section_bounds(cached, index, filling_payment)
            section = f"[{start}, {end})"
        except SectionBoundsError:
            section = "-"
        table.add_row(
            str(index),
            cached_field.identity.name,
            cached_field.field_type.value,
            cached_field.group.value,
            section,
        )
    console.print(table)
