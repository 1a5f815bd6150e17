"""File operation commands."""

from __future__ import annotations

import os
import stat
from typing import TYPE_CHECKING

from rich.markup import escape

from tabshell.cli.commands.registry import Command
from tabshell.cli.completers import complete_paths

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.cli.completers import CompletionSink
    from tabshell.core.session import ShellSession

# Size of each read when dumping a file
_READ_CHUNK = 4096


def _entry_type(entry: os.DirEntry) -> str:
    """Single-letter file type used in ls output."""
    try:
        mode = entry.stat(follow_symlinks=False).st_mode
    except OSError:
        return "?"

    if stat.S_ISBLK(mode):
        return "b"
    if stat.S_ISCHR(mode):
        return "c"
    if stat.S_ISDIR(mode):
        return "d"
    if stat.S_ISFIFO(mode):
        return "f"
    if stat.S_ISLNK(mode):
        return "l"
    if stat.S_ISREG(mode):
        return "f"
    if stat.S_ISSOCK(mode):
        return "s"
    return "?"


def _error(console: Console, message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")


class LsCommand(Command):
    """List a directory."""

    name = "ls"
    usage = "ls [path]"
    description = "list files"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) == 1:
            path = "."
        elif len(args) == 2:
            path = args[1]
        else:
            self.print_usage(console)
            return

        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            _error(console, f"ls: {path}: {e.strerror or e}")
            return

        for entry in entries:
            console.print(f"{_entry_type(entry)} {entry.name}", markup=False, highlight=False)

    def complete(self, args: list[str], sink: CompletionSink) -> bool:
        return complete_paths(args, sink, dirs_only=True)


class PwdCommand(Command):
    name = "pwd"
    usage = "pwd"
    description = "print working directory"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) != 1:
            self.print_usage(console)
            return

        try:
            cwd = os.getcwd()
        except OSError as e:
            _error(console, f"pwd: {e.strerror or e}")
            return

        console.print(cwd, markup=False, highlight=False, soft_wrap=True)


class CdCommand(Command):
    """Change the working directory, defaulting to $HOME."""

    name = "cd"
    usage = "cd [path]"
    description = "change directory"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) == 1:
            path = os.environ.get("HOME") or "/"
        elif len(args) == 2:
            path = args[1]
        else:
            self.print_usage(console)
            return

        try:
            os.chdir(path)
        except OSError as e:
            _error(console, f"cd: {path}: {e.strerror or e}")

    def complete(self, args: list[str], sink: CompletionSink) -> bool:
        return complete_paths(args, sink, dirs_only=True)


class CatCommand(Command):
    """Dump one or more files to the console."""

    name = "cat"
    usage = "cat file..."
    description = "show files"

    def execute(
        self,
        session: ShellSession,
        args: list[str],
        console: Console,
    ) -> None:
        if len(args) <= 1:
            self.print_usage(console)
            return

        for path in args[1:]:
            try:
                with open(path, encoding="utf-8", errors="replace") as f:
                    while chunk := f.read(_READ_CHUNK):
                        console.print(
                            chunk,
                            end="",
                            markup=False,
                            highlight=False,
                            soft_wrap=True,
                        )
            except OSError as e:
                # A failing file does not stop the remaining ones
                _error(console, f"error: open('{path}'): {e.strerror or e}")

    def complete(self, args: list[str], sink: CompletionSink) -> bool:
        return complete_paths(args, sink, max_args=None)
