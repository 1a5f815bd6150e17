"""Tests for the command registry and dispatcher."""

from __future__ import annotations

import pytest

from tabshell.cli.commands.registry import Command, CommandRegistry
from tabshell.core.dispatcher import dispatch


class RecordingCommand(Command):
    name = "record"
    usage = "record arg..."
    description = "remember calls"

    def __init__(self):
        self.calls: list[list[str]] = []

    def execute(self, session, args, console):
        self.calls.append(args)


class FailingCommand(Command):
    name = "boom"
    usage = "boom"
    description = "always fails"

    def execute(self, session, args, console):
        raise RuntimeError("kaboom")


@pytest.fixture
def recording_session(make_session):
    session = make_session()
    recorder = RecordingCommand()
    session.registry = CommandRegistry([recorder, FailingCommand()])
    return session, recorder


class TestRegistry:
    def test_default_registry_order(self):
        names = [command.name for command in CommandRegistry.default().list()]
        assert names == [
            "echo", "ls", "pwd", "cd", "cat", "help",
            "history", "clear", "keys", "mask", "multiline", "exit",
        ]

    def test_find_is_exact_and_case_sensitive(self):
        registry = CommandRegistry.default()
        assert registry.find("echo").name == "echo"
        assert registry.find("ECHO") is None
        assert registry.find("ech") is None

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            CommandRegistry([RecordingCommand(), RecordingCommand()])

    def test_list_is_a_copy(self):
        registry = CommandRegistry.default()
        registry.list().clear()
        assert len(registry) == 12


class TestDispatch:
    def test_empty_line_has_no_effect(self, recording_session, console_buffer):
        session, recorder = recording_session
        console, buf = console_buffer

        dispatch("", session, console)
        dispatch("   \t ", session, console)

        assert recorder.calls == []
        assert buf.getvalue() == ""

    def test_invalid_command(self, recording_session, console_buffer):
        session, recorder = recording_session
        console, buf = console_buffer

        dispatch("nosuch x", session, console)

        assert buf.getvalue() == "Invalid command: nosuch\n"
        assert recorder.calls == []

    def test_handler_gets_full_token_list(self, recording_session, console_buffer):
        session, recorder = recording_session
        console, _ = console_buffer

        dispatch("  record  a\tb  ", session, console)

        assert recorder.calls == [["record", "a", "b"]]

    def test_handler_failure_is_contained(self, recording_session, console_buffer):
        session, _ = recording_session
        console, buf = console_buffer

        dispatch("boom", session, console)

        assert "Error executing boom: kaboom" in buf.getvalue()

    def test_echo(self, make_session, console_buffer):
        console, buf = console_buffer
        dispatch("echo hi", make_session(), console)
        assert buf.getvalue() == "hi\n"
