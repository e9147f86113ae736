"""``outpost method`` — show which transport method a group would use."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from outpost.cli.commands._common import build_pipeline
from outpost.core.errors import UserAborted
from outpost.models.transport import OverrideFlag

console = Console()


def method_cmd(
    group: str = typer.Argument(None, help="Group the message is posted from."),
    profile: Path = typer.Option(None, "--profile", "-p", help="Profile JSON file."),
    inverse: bool = typer.Option(False, "--inverse", help="Use the inverse of the default."),
    choose: bool = typer.Option(False, "--choose", help="Pick from every posting method."),
    method_label: str = typer.Option(None, "--method", "-m", help="Method label to pick when asked."),
) -> None:
    """Resolve the posting method for GROUP."""
    override = OverrideFlag.NONE
    if choose:
        override = OverrideFlag.CHOOSE
    elif inverse:
        override = OverrideFlag.INVERSE

    pipeline = build_pipeline(profile, method_label=method_label)
    try:
        method = pipeline.resolve_transport(override, group)
    except UserAborted as exc:
        console.print(f"[yellow]Aborted:[/yellow] {exc}")
        raise typer.Exit(code=1)
    console.print(f"[bold]{method.label}[/bold]  [dim]{method}[/dim]")
