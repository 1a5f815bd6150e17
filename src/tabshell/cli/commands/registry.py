"""Command descriptors and the read-only command table."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.cli.completers import CompletionSink
    from tabshell.core.session import ShellSession


class Command(ABC):
    """Base class for shell commands."""

    name: str
    usage: str = ""
    description: str = ""

    @abstractmethod
    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        """Execute the command. ``args[0]`` is the command name."""
        ...

    def complete(self, args: list[str], sink: CompletionSink) -> bool:
        """Add full-line candidates for *args* to *sink*. Override in subclasses."""
        return False

    def print_usage(self, console: Console) -> None:
        console.print(f"usage: {self.usage}", markup=False, highlight=False)


class CommandRegistry:
    """Fixed table of available commands, in definition order."""

    def __init__(self, commands: Iterable[Command]):
        self._commands: tuple[Command, ...] = tuple(commands)

        seen: set[str] = set()
        for command in self._commands:
            if command.name in seen:
                raise ValueError(f"Duplicate command name: {command.name}")
            seen.add(command.name)

    def find(self, name: str) -> Command | None:
        """Get command by exact, case-sensitive name."""
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def list(self) -> list[Command]:
        """Get all commands in definition order."""
        return list(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    @classmethod
    def default(cls) -> CommandRegistry:
        """Build the table of built-in commands."""
        from tabshell.cli.commands.echo import EchoCommand
        from tabshell.cli.commands.file_ops import (
            CatCommand,
            CdCommand,
            LsCommand,
            PwdCommand,
        )
        from tabshell.cli.commands.help import HelpCommand
        from tabshell.cli.commands.history import ExitCommand, HistoryCommand
        from tabshell.cli.commands.terminal import (
            ClearCommand,
            KeysCommand,
            MaskCommand,
            MultilineCommand,
        )

        help_command = HelpCommand()
        registry = cls([
            EchoCommand(),
            LsCommand(),
            PwdCommand(),
            CdCommand(),
            CatCommand(),
            help_command,
            HistoryCommand(),
            ClearCommand(),
            KeysCommand(),
            MaskCommand(),
            MultilineCommand(),
            ExitCommand(),
        ])
        help_command.registry = registry
        return registry
