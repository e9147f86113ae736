"""Main Typer application — registers all CLI commands.

Entry point: ``outpost`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from outpost.cli.commands.fetch import fetch_cmd
from outpost.cli.commands.method import method_cmd
from outpost.cli.commands.send import send_cmd
from outpost.cli.commands.styles import styles_cmd

app = typer.Typer(
    name="outpost",
    help="Outpost: posting styles, transport selection and archival copies.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="styles", help="Show the posting style that applies to a group.")(styles_cmd)
app.command(name="method", help="Show the transport method for a group.")(method_cmd)
app.command(name="send", help="Compose, send and archive a message.")(send_cmd)
app.command(name="fetch", help="Print an archived copy.")(fetch_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
