"""
Terminal input - key event types, a decoder for raw terminal input and
a blocking raw-mode reader.
"""

import codecs
import os
import re
import select
import shutil
import signal
import sys
import termios
import tty
from collections import deque
from dataclasses import dataclass
from enum import Enum, Flag
from typing import Optional, Union


class Key(Enum):
    """Identity of a key press."""
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    TAB = "tab"


class Modifier(Flag):
    """Modifier keys held during a key press."""
    NONE = 0
    SHIFT = 1
    CONTROL = 2
    ALT = 4


class KeyEventKind(Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    """A single key event. `char` is set for Key.CHAR only."""
    key: Key
    char: Optional[str] = None
    modifiers: Modifier = Modifier.NONE
    kind: KeyEventKind = KeyEventKind.PRESS

    @classmethod
    def of_char(cls, char: str, modifiers: Modifier = Modifier.NONE) -> "KeyEvent":
        return cls(Key.CHAR, char, modifiers)

    @property
    def is_plain(self) -> bool:
        """True when neither Control nor Alt is held."""
        return not (self.modifiers & (Modifier.CONTROL | Modifier.ALT))

    @property
    def is_control(self) -> bool:
        return bool(self.modifiers & Modifier.CONTROL)


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal window changed size."""
    width: int
    height: int


@dataclass(frozen=True)
class MouseEvent:
    """A pointer report from the terminal."""
    button: int
    x: int
    y: int
    pressed: bool = True


Event = Union[KeyEvent, ResizeEvent, MouseEvent]


ESC = "\x1b"

# Seconds to wait for the rest of an escape sequence
ESCAPE_DELAY = 0.05

# Index of the output flags in a termios attribute list
OFLAG = 1

# Final byte of "ESC [ x" / "ESC O x" sequences
_CSI_FINAL_KEYS = {
    "A": Key.UP,
    "B": Key.DOWN,
    "C": Key.RIGHT,
    "D": Key.LEFT,
    "H": Key.HOME,
    "F": Key.END,
}

# "ESC [ n ~" sequences
_CSI_TILDE_KEYS = {
    "1": Key.HOME,
    "3": Key.DELETE,
    "4": Key.END,
    "5": Key.PAGE_UP,
    "6": Key.PAGE_DOWN,
    "7": Key.HOME,
    "8": Key.END,
}

_INCOMPLETE_ESCAPE = re.compile(r"\x1b(\[[0-9;?<]*|O)?\Z")

_SGR_MOUSE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")
_CSI = re.compile(r"\x1b\[([0-9;?]*)([@-~])")


def _decode_escape(text: str, pos: int) -> tuple[Optional[Event], int]:
    """Decode the escape sequence starting at text[pos]; returns (event, next_pos)."""
    if pos + 1 >= len(text):
        return KeyEvent(Key.ESCAPE), pos + 1

    nxt = text[pos + 1]

    if nxt == "[":
        mouse = _SGR_MOUSE.match(text, pos)
        if mouse:
            button, x, y, final = mouse.groups()
            event = MouseEvent(int(button), int(x), int(y), pressed=final == "M")
            return event, mouse.end()

        csi = _CSI.match(text, pos)
        if not csi:
            return KeyEvent.of_char("[", Modifier.ALT), pos + 2

        params, final = csi.groups()
        if final in _CSI_FINAL_KEYS:
            return KeyEvent(_CSI_FINAL_KEYS[final]), csi.end()
        if final == "~":
            key = _CSI_TILDE_KEYS.get(params.split(";")[0])
            if key is not None:
                return KeyEvent(key), csi.end()
        # Unknown sequence, swallow it
        return None, csi.end()

    if nxt == "O" and pos + 2 < len(text) and text[pos + 2] in _CSI_FINAL_KEYS:
        return KeyEvent(_CSI_FINAL_KEYS[text[pos + 2]]), pos + 3

    if nxt == ESC:
        return KeyEvent(Key.ESCAPE), pos + 1

    # Alt+key arrives as ESC followed by the key
    inner, end = _decode_plain(text, pos + 1)
    if isinstance(inner, KeyEvent):
        return KeyEvent(inner.key, inner.char, inner.modifiers | Modifier.ALT), end
    return inner, end


def _decode_plain(text: str, pos: int) -> tuple[Optional[Event], int]:
    ch = text[pos]
    if ch in ("\r", "\n"):
        return KeyEvent(Key.ENTER), pos + 1
    if ch in ("\x7f", "\x08"):
        return KeyEvent(Key.BACKSPACE), pos + 1
    if ch == "\t":
        return KeyEvent(Key.TAB), pos + 1
    if "\x01" <= ch <= "\x1a":
        return KeyEvent.of_char(chr(ord(ch) + 0x60), Modifier.CONTROL), pos + 1
    if ch.isprintable():
        return KeyEvent.of_char(ch), pos + 1
    return None, pos + 1


def has_incomplete_escape(text: str) -> bool:
    """True when text ends in a prefix of an escape sequence."""
    return _INCOMPLETE_ESCAPE.search(text) is not None


def decode_input(text: str) -> list[Event]:
    """
    Decode a chunk of raw terminal input into events.
    
    Args:
        text: Characters read from a terminal in raw mode.
        
    Returns:
        Events in the order they were typed. Unrecognised sequences are dropped.
    """
    events: list[Event] = []
    pos = 0
    while pos < len(text):
        if text[pos] == ESC:
            event, pos = _decode_escape(text, pos)
        else:
            event, pos = _decode_plain(text, pos)
        if event is not None:
            events.append(event)
    return events


class TerminalReader:
    """
    Blocking reader of terminal events.
    
    Puts stdin in raw mode while open and reports window size changes as
    ResizeEvent. Use as a context manager so the terminal is restored.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self.fd = self.stream.fileno()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque = deque()
        self._buffer = ""
        self._old_settings = None
        self._old_winch = None
        self._wake_r: Optional[int] = None
        self._wake_w: Optional[int] = None

    def open(self) -> None:
        """Enter raw mode and start watching for resizes."""
        self._old_settings = termios.tcgetattr(self.fd)
        tty.setraw(self.fd)
        # Raw input, but keep newline translation for the screen output
        attrs = termios.tcgetattr(self.fd)
        attrs[OFLAG] |= termios.OPOST | termios.ONLCR
        termios.tcsetattr(self.fd, termios.TCSANOW, attrs)
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_w, False)
        self._old_winch = signal.signal(signal.SIGWINCH, self._on_winch)

    def close(self) -> None:
        """Restore the terminal and release the wake-up pipe."""
        if self._old_winch is not None:
            signal.signal(signal.SIGWINCH, self._old_winch)
            self._old_winch = None
        if self._old_settings is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None
        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                os.close(fd)
        self._wake_r = self._wake_w = None

    def __enter__(self) -> "TerminalReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_winch(self, signum, frame) -> None:
        try:
            os.write(self._wake_w, b"w")
        except (BlockingIOError, TypeError):
            pass

    def read_event(self) -> Event:
        """Block until the next event is available and return it."""
        while not self._pending:
            readable, _, _ = select.select([self.fd, self._wake_r], [], [])
            if self._wake_r in readable:
                os.read(self._wake_r, 1024)
                size = shutil.get_terminal_size()
                self._pending.append(ResizeEvent(size.columns, size.lines))
            if self.fd in readable:
                data = os.read(self.fd, 1024)
                if not data:
                    raise EOFError("terminal input closed")
                text = self._buffer + self._decoder.decode(data)
                # A lone ESC may be the start of a sequence still in transit
                if has_incomplete_escape(text) and select.select([self.fd], [], [], ESCAPE_DELAY)[0]:
                    self._buffer = text
                    continue
                self._buffer = ""
                self._pending.extend(decode_input(text))
        return self._pending.popleft()
