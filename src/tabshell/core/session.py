"""Session state management."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tabshell.config.settings import ShellConfig

if TYPE_CHECKING:
    from tabshell.cli.commands.registry import CommandRegistry
    from tabshell.cli.editor import LineEditor


@dataclass
class ShellSession:
    """Holds all state for one shell process."""

    config: ShellConfig
    editor: LineEditor
    registry: CommandRegistry

    # Cleared by the exit command; both edit loops stop once it is False
    running: bool = True

    @property
    def prompt(self) -> str:
        return self.config.prompt

    @property
    def history_path(self) -> Path:
        """Get the history file path."""
        return Path(self.config.history.path).expanduser()

    def save_history(self) -> None:
        """Persist the editor's history to the history file."""
        self.editor.save_history(self.history_path)

    def request_exit(self) -> None:
        self.running = False
