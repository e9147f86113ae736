"""``outpost fetch`` — print an archived copy from a backend."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from outpost.cli.commands._common import build_pipeline
from outpost.core.errors import OutpostError

console = Console()


def fetch_cmd(
    destination: str = typer.Argument(..., help="Archive destination name."),
    sequence_id: int = typer.Argument(..., help="Sequence id of the copy."),
    profile: Path = typer.Option(None, "--profile", "-p", help="Profile JSON file."),
) -> None:
    """Print copy SEQUENCE_ID of DESTINATION."""
    pipeline = build_pipeline(profile, interactive=False)
    target = pipeline.fanout.resolve_destination(destination)
    try:
        backend = pipeline.registry.backend_for(target.method)
        content = backend.retrieve(target.group, sequence_id)
    except (OutpostError, KeyError) as exc:
        console.print(f"[red]Not found:[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(content.decode("utf-8", errors="replace"), markup=False, highlight=False)
