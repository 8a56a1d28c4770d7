"""
Tests for the TUI module.
"""

import termios
from io import StringIO

import pytest
from rich.console import Console

from nordvpn_tui.keys import Key, KeyEvent, Modifier, ResizeEvent
from nordvpn_tui.models import Connected, InputMode
from nordvpn_tui.tui import NordVPNTUI

from conftest import CONNECTED_STATUS, FakeBackend


class ScriptedReader:
    """Stands in for TerminalReader, replaying a fixed list of events."""

    def __init__(self, events):
        self.events = list(events)
        self.opened = False
        self.closed = False

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def read_event(self):
        if not self.events:
            raise EOFError
        return self.events.pop(0)


def make_tui(backend, events):
    reader = ScriptedReader(events)
    console = Console(file=StringIO(), width=100, height=30)
    tui = NordVPNTUI(backend, console=console, reader_factory=lambda: reader)
    return tui, reader, console


class TestNordVPNTUI:
    """Tests for the interactive loop."""

    def test_quit_immediately(self):
        backend = FakeBackend()
        tui, reader, _ = make_tui(backend, [KeyEvent.of_char("q")])
        assert tui.run() == 0
        assert reader.opened and reader.closed
        assert tui.session.running is False

    def test_filter_and_connect(self):
        backend = FakeBackend()
        backend.status_after_connect = CONNECTED_STATUS
        events = [
            KeyEvent.of_char("g"),
            KeyEvent.of_char("e"),
            KeyEvent(Key.ENTER),
            ResizeEvent(120, 40),
            KeyEvent(Key.ENTER),
            KeyEvent.of_char("c", Modifier.CONTROL),
        ]
        tui, _, _ = make_tui(backend, events)
        assert tui.run() == 0

        assert ("connect", "Germany") in backend.calls
        assert isinstance(tui.session.status, Connected)
        assert tui.session.mode is InputMode.NORMAL
        assert tui.session.filter_text == "ge"

    def test_input_closed_ends_loop(self):
        tui, _, _ = make_tui(FakeBackend(), [KeyEvent(Key.DOWN)])
        assert tui.run() == 0
        assert tui.session.selected_index == 1
        assert tui.session.running is True

    def test_startup_failure(self):
        backend = FakeBackend()
        backend.fail["list_regions"] = "Whoops! Cannot reach System Daemon."
        tui, reader, console = make_tui(backend, [])
        assert tui.run() == 1
        assert reader.opened is False
        output = console.file.getvalue()
        assert "Failed to initialize nordvpn-tui" in output
        assert "Cannot reach System Daemon" in output

    def test_backend_errors_do_not_stop_loop(self):
        backend = FakeBackend()
        backend.fail["connect"] = "boom"
        backend.fail["disconnect"] = "boom"
        events = [
            KeyEvent(Key.ENTER),
            KeyEvent.of_char("d", Modifier.CONTROL),
            KeyEvent(Key.DOWN),
            KeyEvent(Key.ESCAPE),
        ]
        tui, _, _ = make_tui(backend, events)
        assert tui.run() == 0
        assert tui.session.selected_index == 1
        assert tui.session.message is None

    def test_no_terminal(self):
        """Without a terminal on stdin the loop reports an error instead of a traceback."""
        def no_tty():
            raise termios.error(25, "Inappropriate ioctl for device")

        backend = FakeBackend()
        console = Console(file=StringIO(), width=100, height=30)
        tui = NordVPNTUI(backend, console=console, reader_factory=no_tty)
        assert tui.run() == 1
        assert ("list_regions",) in backend.calls
        assert "needs an interactive terminal" in console.file.getvalue()
