"""Commands that change or inspect the line editor."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from tabshell.cli.commands.registry import Command
from tabshell.cli.completers import complete_choices

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.cli.completers import CompletionSink
    from tabshell.core.session import ShellSession

_SWITCH_VALUES = ("on", "off")


class ClearCommand(Command):
    name = "clear"
    usage = "clear"
    description = "clear screen"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) != 1:
            self.print_usage(console)
            return
        session.editor.clear_screen()


class KeysCommand(Command):
    """Echo raw key codes until ``quit`` is typed."""

    name = "keys"
    usage = "keys"
    description = "show keys"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) != 1:
            self.print_usage(console)
            return
        session.editor.print_key_codes(console)


class _SwitchCommand(Command):
    """Base for commands taking a single ``on|off`` argument."""

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) != 2 or args[1] not in _SWITCH_VALUES:
            self.print_usage(console)
            return
        self.switch(session, args[1] == "on")

    @abstractmethod
    def switch(self, session: ShellSession, enabled: bool) -> None:
        ...

    def complete(self, args: list[str], sink: CompletionSink) -> bool:
        return complete_choices(args, sink, _SWITCH_VALUES)


class MaskCommand(_SwitchCommand):
    """Hide typed characters, e.g. for entering secrets."""

    name = "mask"
    usage = "mask on|off"
    description = "set mask mode"

    def switch(self, session: ShellSession, enabled: bool) -> None:
        session.editor.mask_mode = enabled


class MultilineCommand(_SwitchCommand):
    name = "multiline"
    usage = "multiline on|off"
    description = "multiline mode"

    def switch(self, session: ShellSession, enabled: bool) -> None:
        session.editor.multiline = enabled
