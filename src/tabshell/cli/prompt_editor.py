"""Line editor built on prompt_toolkit."""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import sys
from contextlib import ExitStack
from typing import TYPE_CHECKING, Any

from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.input.vt100 import raw_mode
from prompt_toolkit.input.vt100_parser import Vt100Parser
from prompt_toolkit.key_binding import KeyBindings, KeyPress, KeyPressEvent
from prompt_toolkit.shortcuts import clear

from tabshell.cli.editor import EDIT_MORE, EditSession, LineEditor, _EditMore

if TYPE_CHECKING:
    from prompt_toolkit.completion import Completer
    from prompt_toolkit.output import Output
    from rich.console import Console

logger = logging.getLogger(__name__)

# Bytes consumed per readiness notification
_READ_SIZE = 1024

# Seconds before a trailing escape byte is taken as a plain Escape key
_ESCAPE_TIMEOUT = 0.5


def _edit_bindings() -> KeyBindings:
    """Bindings for incremental sessions.

    Ctrl-C ends the line with an empty result rather than raising
    KeyboardInterrupt inside the prompt task.
    """
    bindings = KeyBindings()

    @bindings.add("c-c")
    def _(event: KeyPressEvent) -> None:
        event.app.exit(result="", style="class:aborting")

    return bindings


class PromptToolkitEditor(LineEditor):
    """:class:`LineEditor` backed by prompt_toolkit prompt sessions."""

    def __init__(
        self,
        completer: Completer,
        history_max_length: int = 1000,
        input_fd: int | None = None,
        output: Output | None = None,
    ) -> None:
        super().__init__(history_max_length)
        self.completer = completer
        self.input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self.output = output
        self._prompt_session: PromptSession | None = None

    def session_options(self) -> dict[str, Any]:
        return {
            "history": self.history,
            "completer": self.completer,
            "complete_while_typing": False,
            "is_password": self.mask_mode,
            "wrap_lines": self.multiline,
            "output": self.output,
        }

    def read_line(self, prompt: str) -> str | None:
        if self._prompt_session is None:
            self._prompt_session = PromptSession(**self.session_options())

        try:
            return self._prompt_session.prompt(
                prompt,
                is_password=self.mask_mode,
                wrap_lines=self.multiline,
            )
        except KeyboardInterrupt:
            return ""
        except EOFError:
            return None

    def open_session(self, prompt: str) -> PromptToolkitEditSession:
        return PromptToolkitEditSession(self, prompt)

    def clear_screen(self) -> None:
        clear()

    def print_key_codes(self, console: Console) -> None:
        console.print(
            "Key codes debugging mode.\n"
            "Press keys to see scan codes. Type 'quit' at any time to exit.",
            markup=False,
        )

        typed = ""
        with raw_mode(self.input_fd):
            while True:
                data = os.read(self.input_fd, 1)
                if not data:
                    break

                char = data.decode("latin-1")
                typed = (typed + char)[-4:]
                if typed == "quit":
                    break

                shown = char if char.isprintable() else "?"
                console.print(
                    f"'{shown}' {data[0]:02x} ({data[0]}) (type quit to exit)",
                    end="\r\n",
                    markup=False,
                    highlight=False,
                )
        console.print()


class PromptToolkitEditSession(EditSession):
    """Incremental edit of one line.

    The prompt application runs with an idle pipe as its input. Bytes read
    from the real input descriptor are decoded, parsed into key presses and
    pushed straight into the application's key processor, so every
    :meth:`feed` call leaves the buffer fully updated.

    A lone escape byte is ambiguous until more input arrives. When a read
    ends inside such a sequence, the parser is flushed after the
    application's ``ttimeoutlen`` so a plain Escape key still takes effect.
    """

    def __init__(self, editor: PromptToolkitEditor, prompt: str) -> None:
        self.editor = editor
        self.prompt = prompt
        self._fd = editor.input_fd
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._keys: list[KeyPress] = []
        self._parser = Vt100Parser(self._keys.append)
        self._stack = ExitStack()
        self._prompt_session: PromptSession | None = None
        self._task: asyncio.Future[str] | None = None
        self._flush_handle: asyncio.TimerHandle | None = None
        self._closed = False

    def fileno(self) -> int:
        return self._fd

    @property
    def prompt_session(self) -> PromptSession:
        if self._prompt_session is None:
            raise RuntimeError("Edit session has not been started")
        return self._prompt_session

    @property
    def is_done(self) -> bool:
        if self._prompt_session is None:
            return False
        future = self._prompt_session.app.future
        return future is not None and future.done()

    async def start(self) -> None:
        pipe_input = self._stack.enter_context(create_pipe_input())
        self._stack.enter_context(raw_mode(self._fd))

        self._prompt_session = PromptSession(
            input=pipe_input,
            key_bindings=_edit_bindings(),
            **self.editor.session_options(),
        )
        self._task = asyncio.ensure_future(self._prompt_session.prompt_async(self.prompt))

        # Let the application draw the prompt before any key arrives
        app = self._prompt_session.app
        while not app.is_running and not self._task.done():
            await asyncio.sleep(0)

    async def feed(self) -> str | None | _EditMore:
        self._cancel_flush()

        try:
            data = os.read(self._fd, _READ_SIZE)
        except BlockingIOError:
            return EDIT_MORE
        if not data:
            return None

        self._parser.feed(self._decoder.decode(data))
        self._process_keys()

        if self._task is None or not (self.is_done or self._task.done()):
            self._schedule_flush()
            return EDIT_MORE

        try:
            return await self._task
        except EOFError:
            return None

    def hide(self) -> None:
        self.prompt_session.app.renderer.erase()

    def show(self) -> None:
        app = self.prompt_session.app
        app.renderer.reset()
        app.renderer.render(app, app.layout)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        self._cancel_flush()
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling unfinished prompt")
            self._task.cancel()
        self._stack.close()

    @property
    def text(self) -> str:
        return self.prompt_session.default_buffer.text

    @property
    def cursor_position(self) -> int:
        return self.prompt_session.default_buffer.cursor_position

    def _process_keys(self) -> None:
        keys = self._keys[:]
        self._keys.clear()
        if not keys:
            return

        key_processor = self.prompt_session.app.key_processor
        key_processor.feed_multiple(keys)
        key_processor.process_keys()

    def _schedule_flush(self) -> None:
        # Flushing an empty parser emits nothing
        timeout = self.prompt_session.app.ttimeoutlen
        if timeout is None:
            timeout = _ESCAPE_TIMEOUT
        loop = asyncio.get_running_loop()
        self._flush_handle = loop.call_later(timeout, self._flush_parser)

    def _cancel_flush(self) -> None:
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

    def _flush_parser(self) -> None:
        self._flush_handle = None
        if self._closed or self.is_done:
            return

        self._parser.flush()
        if self._keys:
            logger.debug("Flushing %d pending key(s)", len(self._keys))
        self._process_keys()
