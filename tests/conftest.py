"""Shared fixtures: scripted line editor and captured console."""

from __future__ import annotations

import os
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from tabshell.cli.commands.registry import CommandRegistry
from tabshell.cli.editor import EDIT_MORE, EditSession, LineEditor
from tabshell.config.settings import EditorConfig, HistoryConfig, ShellConfig
from tabshell.core.session import ShellSession


class RecordingFile(StringIO):
    """StringIO that also logs each write into a shared event list."""

    def __init__(self, events: list) -> None:
        super().__init__()
        self.events = events

    def write(self, s: str) -> int:
        if s:
            self.events.append(("write", s))
        return super().write(s)


class ScriptedEditSession(EditSession):
    """Edit session reading one byte per feed from a pipe.

    ``\\n`` accepts the line and ``\\x02`` moves the cursor left.
    """

    def __init__(self, editor: ScriptedEditor, prompt: str) -> None:
        self.editor = editor
        self.prompt = prompt
        self._text = ""
        self._cursor = 0
        self.visible = False
        self.done = False
        self.close_calls = 0

    def fileno(self) -> int:
        return self.editor.read_fd

    async def start(self) -> None:
        self.visible = True
        self.editor.events.append(("start", self.prompt))

    async def feed(self):
        data = os.read(self.editor.read_fd, 1)
        if not data:
            return None

        char = data.decode()
        if char == "\n":
            self.done = True
            return self._text
        if char == "\x02":
            self._cursor = max(0, self._cursor - 1)
        else:
            self._text = self._text[: self._cursor] + char + self._text[self._cursor:]
            self._cursor += 1
        return EDIT_MORE

    def hide(self) -> None:
        self.visible = False
        self.editor.events.append(("hide", self._text, self._cursor))

    def show(self) -> None:
        self.visible = True
        self.editor.events.append(("show", self._text, self._cursor))

    def close(self) -> None:
        self.close_calls += 1
        self.editor.events.append(("close",))

    @property
    def is_done(self) -> bool:
        return self.done

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor_position(self) -> int:
        return self._cursor


class ScriptedEditor(LineEditor):
    """Line editor replaying a fixed script.

    Blocking reads pop lines from *lines*. Asynchronous sessions read the
    same lines from a pipe, which is closed after the script so the reader
    sees end of input.
    """

    def __init__(self, lines: list[str], close_input: bool = True) -> None:
        super().__init__(history_max_length=1000)
        self.lines = list(lines)
        self.events: list = []
        self.sessions: list[ScriptedEditSession] = []
        self.read_fd, self.write_fd = os.pipe()
        if lines:
            os.write(self.write_fd, "".join(f"{line}\n" for line in lines).encode())
        if close_input:
            self.close_input()

    def close_input(self) -> None:
        if self.write_fd is not None:
            os.close(self.write_fd)
            self.write_fd = None

    def send(self, text: str) -> None:
        os.write(self.write_fd, text.encode())

    def read_line(self, prompt: str) -> str | None:
        self.events.append(("read_line", prompt))
        if not self.lines:
            return None
        return self.lines.pop(0)

    def open_session(self, prompt: str) -> ScriptedEditSession:
        session = ScriptedEditSession(self, prompt)
        self.sessions.append(session)
        return session

    def clear_screen(self) -> None:
        self.events.append(("clear",))

    def print_key_codes(self, console: Console) -> None:
        self.events.append(("keys",))

    def dispose(self) -> None:
        self.close_input()
        os.close(self.read_fd)


@pytest.fixture
def console_buffer():
    """Return a Console that writes to a StringIO buffer, and the buffer."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=False, width=200)
    return console, buf


@pytest.fixture
def make_editor():
    editors: list[ScriptedEditor] = []

    def factory(lines: list[str] | None = None, close_input: bool = True) -> ScriptedEditor:
        editor = ScriptedEditor(lines or [], close_input=close_input)
        editors.append(editor)
        return editor

    yield factory

    for editor in editors:
        editor.dispose()


@pytest.fixture
def make_session(tmp_path: Path, make_editor):
    """Build a ShellSession around a scripted editor, with history in *tmp_path*."""

    def factory(lines: list[str] | None = None, close_input: bool = True) -> ShellSession:
        config = ShellConfig(
            history=HistoryConfig(path=str(tmp_path / "history")),
            editor=EditorConfig(poll_interval=0.05),
        )
        return ShellSession(
            config=config,
            editor=make_editor(lines, close_input=close_input),
            registry=CommandRegistry.default(),
        )

    return factory


@pytest.fixture
def recording_console():
    """Return a factory for Consoles whose writes are logged into *events*."""

    def factory(events: list) -> tuple[Console, RecordingFile]:
        file = RecordingFile(events)
        return Console(file=file, force_terminal=False, width=200), file

    return factory
