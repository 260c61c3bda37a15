#!/usr/bin/env python3
"""Main CLI entry point for fillwise."""
from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from ..config import get_settings
from .commands import fill, sections, suggest

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="fillwise")
@click.option("--log-level", default=None, help="Override FILLWISE_LOG_LEVEL")
def cli(log_level):
    """
    fillwise - inspect how saved records map onto a form.

    Every command reads a JSON scenario describing the cached form, the live
    form and the saved records.
    """
    level = (log_level or get_settings().log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


cli.add_command(suggest.suggest_command)
cli.add_command(fill.fill_command)
cli.add_command(sections.sections_command)


def main():
    """Entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
