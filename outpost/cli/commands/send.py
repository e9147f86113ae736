"""``outpost send`` — compose, send and archive one message."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from outpost.cli.commands._common import build_pipeline
from outpost.core.errors import OutpostError
from outpost.models.context import ComposeContext

console = Console()


def send_cmd(
    group: str = typer.Option(None, "--group", "-g", help="Group the message is posted from."),
    to: list[str] = typer.Option([], "--to", "-t", help="Recipient address (repeatable)."),
    subject: str = typer.Option("", "--subject", "-s", help="Subject line."),
    body_file: Path = typer.Option(None, "--body", "-b", help="File holding the message body."),
    profile: Path = typer.Option(None, "--profile", "-p", help="Profile JSON file."),
    interactive: bool = typer.Option(True, help="Allow interactive prompts."),
    method: str = typer.Option(None, "--method", "-m", help="Method label to pick when asked."),
) -> None:
    """Compose a message, send it, and store its archive copies."""
    pipeline = build_pipeline(profile, interactive=interactive, method_label=method)
    body = body_file.read_text(encoding="utf-8") if body_file else ""
    context = ComposeContext(group=group)

    try:
        session = pipeline.setup_draft(context, to, subject, body=body)
        report = pipeline.send(session, interactive_allowed=interactive)
    except OutpostError as exc:
        console.print(f"[red]Send failed:[/red] {exc}")
        raise typer.Exit(code=1)

    console.print(
        Panel(
            "\n".join([
                f"[bold]Method:[/bold]  {report.method.label}",
                f"[bold]Receipt:[/bold] {report.receipt}",
            ]),
            title="[bold green]Sent[/bold green]",
            border_style="green",
        )
    )
    if report.archive_results:
        table = Table(title="Archive copies")
        table.add_column("Destination", style="cyan")
        table.add_column("Result")
        for result in report.archive_results:
            if result.ok:
                table.add_row(result.destination, f"[green]stored as {result.sequence_id}[/green]")
            else:
                table.add_row(result.destination, f"[red]{result.reason}[/red]")
        console.print(table)
