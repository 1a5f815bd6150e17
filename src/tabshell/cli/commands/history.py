"""History and exit commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabshell.cli.commands.registry import Command

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.core.session import ShellSession


class HistoryCommand(Command):
    """Show numbered history, as saved to the history file."""

    name = "history"
    usage = "history"
    description = "show history"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) != 1:
            self.print_usage(console)
            return

        session.save_history()

        try:
            with open(session.history_path, encoding="utf-8", errors="replace") as f:
                lines = f.read().splitlines()
        except OSError:
            return

        for number, line in enumerate(lines, start=1):
            console.print(f"{number:<4} {line}", markup=False, highlight=False, soft_wrap=True)


class ExitCommand(Command):
    """Save history and leave the shell."""

    name = "exit"
    usage = "exit"
    description = "bye bye"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        session.save_history()
        session.request_exit()
