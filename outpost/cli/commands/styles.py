"""``outpost styles`` — show the posting-style attributes for a group."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from outpost.cli.commands._common import build_pipeline
from outpost.core.errors import OutpostError
from outpost.models.context import ComposeContext

console = Console()


def styles_cmd(
    group: str = typer.Argument(..., help="Group the message is composed in."),
    profile: Path = typer.Option(None, "--profile", "-p", help="Profile JSON file."),
) -> None:
    """Resolve posting styles for GROUP and print the attribute set."""
    pipeline = build_pipeline(profile, interactive=False)
    try:
        attributes = pipeline.resolve_attributes(ComposeContext(group=group))
    except OutpostError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    if not len(attributes):
        console.print(f"[dim]No posting style applies to {group}.[/dim]")
        return

    table = Table(title=f"Posting style for {group}")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("File", justify="center")
    for key, entry in attributes.items():
        value = entry.value if entry.value is not None else "[dim](suppressed)[/dim]"
        table.add_row(key, value, "yes" if entry.from_file else "")
    console.print(table)
