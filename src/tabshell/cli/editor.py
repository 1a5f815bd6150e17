"""Line-editing service used by the edit loops.

A :class:`LineEditor` reads whole lines in blocking mode, or opens an
:class:`EditSession` that is fed input incrementally as it becomes readable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Final

from tabshell.cli.history import ShellHistory

if TYPE_CHECKING:
    from rich.console import Console


class _EditMore:
    """Type of :data:`EDIT_MORE`."""

    def __repr__(self) -> str:
        return "EDIT_MORE"


# Returned by EditSession.feed() while the line is still being edited
EDIT_MORE: Final = _EditMore()


class EditSession(ABC):
    """One in-progress line edit, fed input chunk by chunk.

    ``feed()`` returns :data:`EDIT_MORE` until the line is complete, then the
    line, or ``None`` at end of input.
    """

    prompt: str

    @abstractmethod
    def fileno(self) -> int:
        """Input file descriptor to wait on before calling :meth:`feed`."""
        ...

    @abstractmethod
    async def start(self) -> None:
        """Display the prompt and get ready for input."""
        ...

    @abstractmethod
    async def feed(self) -> str | None | _EditMore:
        """Consume the input that is currently available."""
        ...

    @abstractmethod
    def hide(self) -> None:
        """Erase the line being edited from the terminal."""
        ...

    @abstractmethod
    def show(self) -> None:
        """Redraw the line being edited exactly as it was."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release terminal resources held by the session."""
        ...

    @property
    def is_done(self) -> bool:
        """True once the line has been accepted and the prompt is gone."""
        return False

    @property
    @abstractmethod
    def text(self) -> str:
        ...

    @property
    @abstractmethod
    def cursor_position(self) -> int:
        ...


class LineEditor(ABC):
    """Terminal line editor with history and completion."""

    def __init__(self, history_max_length: int = 1000) -> None:
        self.history = ShellHistory(history_max_length)
        self.mask_mode = False
        self.multiline = False

    @abstractmethod
    def read_line(self, prompt: str) -> str | None:
        """Block until a line is entered. Returns ``None`` at end of input."""
        ...

    @abstractmethod
    def open_session(self, prompt: str) -> EditSession:
        """Create an incremental edit session for one line."""
        ...

    @abstractmethod
    def clear_screen(self) -> None:
        ...

    @abstractmethod
    def print_key_codes(self, console: Console) -> None:
        """Show the codes of pressed keys until ``quit`` is typed."""
        ...

    def add_history(self, line: str) -> None:
        self.history.append_string(line)

    def load_history(self, path: Path) -> None:
        self.history.load_file(path)

    def save_history(self, path: Path) -> None:
        self.history.save_file(path)
