"""Interactive prompts backed by Rich."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt


class RichChooser:
    """Numbered menu for method choices and yes/no confirmations."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def choose(self, prompt: str, labels: Sequence[str]) -> str | None:
        if not labels:
            self._console.print(f"[yellow]{prompt}: nothing to choose from[/yellow]")
            return None
        for number, label in enumerate(labels, 1):
            self._console.print(f"  [cyan]{number}[/cyan]  {label}")
        answer = Prompt.ask(
            prompt,
            console=self._console,
            choices=[str(n) for n in range(1, len(labels) + 1)] + [""],
            default="",
            show_choices=False,
        )
        if not answer:
            return None
        return labels[int(answer) - 1]

    def confirm(self, prompt: str) -> bool:
        return Confirm.ask(prompt, console=self._console, default=False)


class FixedChooser:
    """Non-interactive chooser: always answers with preset values."""

    def __init__(self, label: str | None = None, confirm: bool = False) -> None:
        self._label = label
        self._confirm = confirm

    def choose(self, prompt: str, labels: Sequence[str]) -> str | None:
        if self._label in labels:
            return self._label
        return None

    def confirm(self, prompt: str) -> bool:
        return self._confirm
