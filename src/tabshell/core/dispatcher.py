"""Resolve an input line to a command and run it."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.markup import escape

from tabshell.core.tokenizer import tokenize

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.core.session import ShellSession

logger = logging.getLogger(__name__)


def dispatch(line: str, session: ShellSession, console: Console) -> None:
    """Tokenize *line* and run the matching command handler.

    Blank lines are ignored and unknown commands are reported. Nothing raised
    by a handler escapes this function.
    """
    args = tokenize(line)
    if not args:
        return

    command = session.registry.find(args[0])
    if command is None:
        console.print(f"[red]Invalid command: {escape(args[0])}[/red]")
        return

    logger.debug("Dispatching %s with %d argument(s)", command.name, len(args) - 1)
    try:
        command.execute(session, args, console)
    except Exception as e:
        logger.warning("Command %s failed", command.name, exc_info=True)
        console.print(f"[red]Error executing {escape(command.name)}: {escape(str(e))}[/red]")
