"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from tabshell.cli.commands.registry import Command
from tabshell.cli.completers import complete_commands

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.cli.commands.registry import CommandRegistry
    from tabshell.cli.completers import CompletionSink
    from tabshell.core.session import ShellSession


class HelpCommand(Command):
    """Show available commands."""

    name = "help"
    usage = "help [command]"
    description = "get help"

    def __init__(self, registry: CommandRegistry | None = None):
        self.registry = registry

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        """Execute the help command."""
        registry = self.registry or session.registry

        if len(args) == 1:
            table = Table(show_header=False, box=None, padding=(0, 2))
            table.add_column("Usage", style="cyan", min_width=28, no_wrap=True)
            table.add_column("Description")
            for command in registry.list():
                table.add_row(escape(command.usage), escape(command.description))
            console.print(table)
            return

        if len(args) == 2:
            command = registry.find(args[1])
            if command is None:
                console.print(f"[red]Invalid command: {escape(args[1])}[/red]")
                return
            command.print_usage(console)
            return

        self.print_usage(console)

    def complete(self, args: list[str], sink: CompletionSink) -> bool:
        if len(args) != 2 or self.registry is None:
            return False
        return complete_commands(args[1], self.registry, sink, lead=f"{args[0]} ")
