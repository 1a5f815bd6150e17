"""Interactive edit loops: blocking and asyncio-driven."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from enum import Enum
from typing import TYPE_CHECKING

from rich.markup import escape

from tabshell.cli.editor import EDIT_MORE
from tabshell.core.dispatcher import dispatch

if TYPE_CHECKING:
    from rich.console import Console

    from tabshell.cli.editor import EditSession
    from tabshell.core.session import ShellSession

logger = logging.getLogger(__name__)


class EditState(Enum):
    """Lifecycle of one line in the asynchronous loop."""

    STARTED = "started"
    FEEDING = "feeding"
    COMPLETE = "complete"
    CLOSED = "closed"


def run_sync(session: ShellSession, console: Console) -> None:
    """Run the blocking read-dispatch loop until end of input or exit."""
    editor = session.editor

    while session.running:
        line = editor.read_line(session.prompt)
        if line is None:
            break

        if line:
            editor.add_history(line)
        dispatch(line, session, console)


class AsyncEditLoop:
    """Non-blocking edit loop driven by input readiness.

    Each line goes through STARTED, FEEDING, COMPLETE and CLOSED. While
    feeding, the loop waits at most ``poll_interval`` seconds for the input
    to become readable and hands whatever arrived to the edit session.
    Configured signals print a notice above the line being edited without
    disturbing it.
    """

    def __init__(
        self,
        session: ShellSession,
        console: Console,
        poll_interval: float | None = None,
        signals: list[signal.Signals] | None = None,
    ):
        self.session = session
        self.console = console

        editor_config = session.config.editor
        self.poll_interval = poll_interval if poll_interval is not None else editor_config.poll_interval
        if signals is None:
            signals = [signal.Signals[name] for name in editor_config.signals]
        self.signals = signals

        self.state = EditState.CLOSED
        self._edit: EditSession | None = None

    @property
    def edit_session(self) -> EditSession | None:
        """The session currently being fed, if any."""
        return self._edit

    async def run(self) -> None:
        """Read and dispatch lines until end of input or exit."""
        loop = asyncio.get_running_loop()
        installed = self._install_signal_handlers(loop)

        try:
            while self.session.running:
                line = await self.read_line()
                if line is None:
                    break

                if line:
                    self.session.editor.add_history(line)
                dispatch(line, self.session, self.console)
        finally:
            for signum in installed:
                loop.remove_signal_handler(signum)

    async def read_line(self) -> str | None:
        """Edit one line. Returns ``None`` at end of input."""
        edit = self.session.editor.open_session(self.session.prompt)
        self._set_state(EditState.STARTED)
        self._edit = edit

        try:
            await edit.start()
            self._set_state(EditState.FEEDING)

            result = EDIT_MORE
            while result is EDIT_MORE:
                if not await self._wait_readable(edit.fileno()):
                    continue
                result = await edit.feed()

            self._set_state(EditState.COMPLETE)
        finally:
            self._edit = None
            edit.close()
            self._set_state(EditState.CLOSED)

        return result

    def notify(self, signum: int) -> None:
        """Print a signal notice above the line being edited."""
        try:
            description = signal.strsignal(signum) or str(signum)
        except ValueError:
            description = str(signum)
        message = f"signal received: {description}"

        edit = self._edit
        if edit is None or edit.is_done:
            self.console.print(message, markup=False, highlight=False)
            return

        edit.hide()
        try:
            self.console.print(message, markup=False, highlight=False)
        finally:
            edit.show()

    def _set_state(self, state: EditState) -> None:
        logger.debug("Edit state %s -> %s", self.state.name, state.name)
        self.state = state

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list[signal.Signals]:
        installed = []
        for signum in self.signals:
            try:
                loop.add_signal_handler(signum, self.notify, signum)
            except (NotImplementedError, RuntimeError, ValueError) as e:
                logger.debug("Cannot handle %s: %s", signum.name, e)
                continue
            installed.append(signum)
        return installed

    async def _wait_readable(self, fd: int) -> bool:
        """Wait up to ``poll_interval`` for *fd* to become readable."""
        loop = asyncio.get_running_loop()
        ready: asyncio.Future[None] = loop.create_future()

        def on_readable() -> None:
            if not ready.done():
                ready.set_result(None)

        while True:
            try:
                loop.add_reader(fd, on_readable)
            except InterruptedError:
                continue
            except (OSError, ValueError) as e:
                self._fatal(e)
            break

        try:
            await asyncio.wait({ready}, timeout=self.poll_interval)
        finally:
            loop.remove_reader(fd)

        return ready.done()

    def _fatal(self, error: Exception) -> None:
        logger.error("Polling input failed: %s", error)
        self.console.print(f"[red]poll(): {escape(str(error))}[/red]")
        sys.exit(1)
