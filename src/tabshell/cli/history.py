"""Bounded line history persisted to a plain text file."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from prompt_toolkit.history import History

logger = logging.getLogger(__name__)


class ShellHistory(History):
    """In-memory history capped at *max_length* entries.

    prompt_toolkit appends accepted lines through :meth:`append_string`; the
    file is only written by :meth:`save_file`. Consecutive duplicates and empty
    lines are not recorded.
    """

    def __init__(self, max_length: int = 1000) -> None:
        super().__init__()
        self.max_length = max_length
        self._entries: list[str] = []  # oldest first
        self._loaded = True

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects newest first
        return reversed(self._entries)

    def store_string(self, string: str) -> None:
        pass

    def append_string(self, string: str) -> None:
        if not string:
            return
        if self._entries and self._entries[-1] == string:
            return

        self._entries.append(string)
        self._trim()

    def get_strings(self) -> list[str]:
        return self.entries

    def _trim(self) -> None:
        if self.max_length <= 0:
            self._entries.clear()
        elif len(self._entries) > self.max_length:
            del self._entries[: len(self._entries) - self.max_length]
        self._loaded_strings = list(reversed(self._entries))

    def load_file(self, path: Path) -> None:
        """Replace the entries with the lines of *path*, if it exists."""
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("Cannot read history file %s: %s", path, e)
            return

        self._entries = [line for line in lines if line]
        self._trim()
        logger.debug("Loaded %d history entries from %s", len(self._entries), path)

    def save_file(self, path: Path) -> None:
        """Write the entries to *path*, one per line."""
        try:
            with open(path, "w", encoding="utf-8") as f:
                for entry in self._entries:
                    f.write(f"{entry}\n")
        except OSError as e:
            logger.warning("Cannot write history file %s: %s", path, e)
