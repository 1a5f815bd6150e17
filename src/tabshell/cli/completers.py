"""Tab completion for the shell."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from tabshell.core.tokenizer import ends_with_delimiter, tokenize

if TYPE_CHECKING:
    from tabshell.cli.commands.registry import CommandRegistry

logger = logging.getLogger(__name__)


class CompletionSink:
    """Append-only list of full-line candidates, kept in insertion order."""

    def __init__(self) -> None:
        self._candidates: list[str] = []

    def add(self, candidate: str) -> None:
        self._candidates.append(candidate)

    @property
    def candidates(self) -> list[str]:
        return list(self._candidates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)


def complete(line: str, registry: CommandRegistry) -> list[str]:
    """Compute full-line completion candidates for a partially typed *line*.

    One token (or none) completes a command name. With more tokens the first
    one selects the command whose completer handles the rest. A trailing
    delimiter counts as the start of a new, empty token, so ``"ls"`` completes
    the command name while ``"ls "`` completes its first argument.

    When nothing matches, the line itself (re-joined with single spaces) is the
    only candidate.
    """
    args = tokenize(line)
    if ends_with_delimiter(line):
        args.append("")

    sink = CompletionSink()
    success = False

    if len(args) <= 1:
        prefix = args[0] if args else ""
        success = complete_commands(prefix, registry, sink)
    else:
        command = registry.find(args[0])
        if command is not None:
            success = command.complete(args, sink)

    if not success:
        sink.add(" ".join(args))

    logger.debug("Completed %r into %d candidate(s)", line, len(sink))
    return sink.candidates


def complete_commands(
    prefix: str,
    registry: CommandRegistry,
    sink: CompletionSink,
    lead: str = "",
) -> bool:
    """Add every command name starting with *prefix*, preceded by *lead*."""
    success = False
    for command in registry.list():
        if command.name.startswith(prefix):
            sink.add(f"{lead}{command.name}")
            success = True
    return success


def complete_choices(
    args: Sequence[str],
    sink: CompletionSink,
    choices: Iterable[str],
) -> bool:
    """Complete a single argument against a fixed set of literals."""
    if len(args) != 2:
        return False

    success = False
    for choice in choices:
        if choice.startswith(args[1]):
            sink.add(f"{args[0]} {choice}")
            success = True
    return success


def complete_paths(
    args: Sequence[str],
    sink: CompletionSink,
    *,
    dirs_only: bool = False,
    max_args: int | None = 1,
) -> bool:
    """Complete the last argument as a filesystem path.

    The argument is split at its final ``/`` into a directory part and a name
    prefix. Directory candidates get a trailing ``/``.
    """
    if len(args) < 2:
        return False
    if max_args is not None and len(args) - 1 > max_args:
        return False

    head, sep, prefix = args[-1].rpartition("/")
    if sep:
        dir_part = head + sep
        listing = dir_part
    else:
        dir_part = ""
        listing = "."

    try:
        with os.scandir(listing) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.debug("Cannot list %s: %s", listing, e)
        return False

    leading = " ".join(args[:-1])
    success = False
    for entry in entries:
        if not entry.name.startswith(prefix):
            continue
        if entry.name in (".", ".."):
            continue

        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        if dirs_only and not is_dir:
            continue

        suffix = "/" if is_dir else ""
        sink.add(f"{leading} {dir_part}{entry.name}{suffix}")
        success = True

    return success


class ShellCompleter(Completer):
    """prompt_toolkit completer backed by :func:`complete`."""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        """Get completions for current input."""
        try:
            candidates = complete(document.text_before_cursor, self.registry)
        except Exception:
            # Never let a completer crash take down the shell.
            logger.warning("Completion failed", exc_info=True)
            return

        text = document.text_before_cursor
        for candidate in candidates:
            yield Completion(
                text=candidate,
                start_position=-len(text),
            )
