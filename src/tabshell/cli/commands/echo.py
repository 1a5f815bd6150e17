"""Echo command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabshell.cli.commands.registry import Command

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.core.session import ShellSession


class EchoCommand(Command):
    """Print the arguments separated by single spaces."""

    name = "echo"
    usage = "echo string..."
    description = "print text"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        console.print(" ".join(args[1:]), markup=False, highlight=False, soft_wrap=True)
