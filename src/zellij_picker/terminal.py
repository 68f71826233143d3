"""Terminal modes and keyboard input for the picker."""

import codecs
import os
import select
import sys
import termios
import tty
from collections import deque
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.text import Text

from .render import render
from .state import PickerState

# Longest time a single poll blocks before the screen is redrawn
POLL_TIMEOUT = 0.1
# How long to wait for the rest of an escape sequence split across reads
ESCAPE_TIMEOUT = 0.02
# Longer unterminated sequences are given up on rather than held
MAX_SEQUENCE = 32

KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_ENTER = "enter"
KEY_ESCAPE = "escape"
KEY_BACKSPACE = "backspace"
KEY_UNKNOWN = "unknown"

ARROWS = {"A": KEY_UP, "B": KEY_DOWN, "C": KEY_RIGHT, "D": KEY_LEFT}

# SGR mouse reporting, so wheel scrolling does not leak to the host terminal
MOUSE_ON = "\x1b[?1000h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1006l\x1b[?1000l"


class TerminalError(Exception):
    """Entering or leaving the interactive terminal modes failed."""


def parse_keys(data: str) -> list[str]:
    """Split decoded terminal input into key names.

    Arrow keys become ``up``/``down``/``left``/``right``, other escape
    sequences (mouse reports, function keys) become ``unknown``, and plain
    characters are returned as they are.
    """
    keys = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            if i + 1 < len(data) and data[i + 1] in "[O":
                # CSI/SS3: parameter bytes then one final byte in @..~
                j = i + 2
                while j < len(data) and not "@" <= data[j] <= "~":
                    j += 1
                if j >= len(data):
                    keys.append(KEY_UNKNOWN)
                    break
                seq = data[i + 2 : j + 1]
                if seq[-1] in ARROWS and not seq.startswith("<"):
                    keys.append(ARROWS[seq[-1]])
                else:
                    keys.append(KEY_UNKNOWN)
                i = j + 1
                continue
            keys.append(KEY_ESCAPE)
        elif ch in "\r\n":
            keys.append(KEY_ENTER)
        elif ch in "\x7f\x08":
            keys.append(KEY_BACKSPACE)
        else:
            keys.append(ch)
        i += 1
    return keys


def incomplete_sequence(data: str) -> int:
    """Return where an unterminated escape sequence at the end of ``data``
    starts, or -1 if the data ends on a whole key.

    A trailing bare ESC counts as unterminated.
    """
    start = data.rfind("\x1b")
    if start == -1:
        return -1
    if start == len(data) - 1:
        return start
    if data[start + 1] not in "[O":
        return -1
    for ch in data[start + 2 :]:
        if "@" <= ch <= "~":
            return -1
    return start


class KeyReader:
    """Read keys from a terminal file descriptor with a bounded wait.

    Reads are fixed-size, so a burst of mouse reports can end mid-sequence.
    The unfinished tail is kept back and joined to the next read instead of
    being decoded as plain characters.
    """

    def __init__(self, fd: int):
        self.fd = fd
        self.pending: deque[str] = deque()
        self.remainder = ""
        self.decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def _ready(self, timeout: float) -> bool:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        return bool(ready)

    def _read(self) -> str:
        chunk = os.read(self.fd, 64)
        if not chunk:
            raise TerminalError("input closed")
        return self.decoder.decode(chunk)

    def poll(self, timeout: float = POLL_TIMEOUT) -> Optional[str]:
        """Return the next key, or None if nothing arrived within ``timeout``."""
        if self.pending:
            return self.pending.popleft()
        if not self._ready(timeout):
            return None

        data = self.remainder + self._read()
        self.remainder = ""
        while incomplete_sequence(data) != -1 and self._ready(ESCAPE_TIMEOUT):
            data += self._read()

        # A bare ESC that stayed alone is the Escape key itself
        start = incomplete_sequence(data)
        if start != -1 and data[start:] != "\x1b" and len(data) - start < MAX_SEQUENCE:
            data, self.remainder = data[:start], data[start:]

        self.pending.extend(parse_keys(data))
        if self.pending:
            return self.pending.popleft()
        return None


class Terminal:
    """Context manager owning the screen while the picker runs.

    Entering puts stdin into cbreak mode, switches to the alternate screen and
    turns on mouse reporting. Leaving undoes every step that was taken, even
    when the loop raised.
    """

    def __init__(self, console: Optional[Console] = None, stdin=None):
        self.console = console or Console()
        self.stdin = stdin or sys.stdin
        self.fd: Optional[int] = None
        self.saved_attrs = None
        self.live: Optional[Live] = None
        self.keys: Optional[KeyReader] = None

    def __enter__(self) -> "Terminal":
        try:
            self.fd = self.stdin.fileno()
            if not os.isatty(self.fd):
                raise TerminalError("stdin is not a terminal")
            self.saved_attrs = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
            self._write(MOUSE_ON)
            self.live = Live(
                Text(""),
                console=self.console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self.live.start()
        except (OSError, termios.error, ValueError) as e:
            self.restore()
            raise TerminalError(str(e)) from e
        except (TerminalError, KeyboardInterrupt):
            self.restore()
            raise

        self.keys = KeyReader(self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def _write(self, sequence: str) -> None:
        self.console.file.write(sequence)
        self.console.file.flush()

    def restore(self) -> None:
        """Undo terminal modes; every step runs even if an earlier one fails."""
        errors = []
        live, self.live = self.live, None
        try:
            if live is not None:
                try:
                    live.stop()
                except OSError as e:
                    errors.append(e)
        finally:
            self._restore_input(errors)
        if errors:
            raise TerminalError(f"failed to restore terminal: {errors[0]}")

    def _restore_input(self, errors: list) -> None:
        if self.saved_attrs is None:
            return
        saved, self.saved_attrs = self.saved_attrs, None
        try:
            self._write(MOUSE_OFF)
        except OSError as e:
            errors.append(e)
        finally:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, saved)
            except (OSError, termios.error) as e:
                errors.append(e)

    def draw(self, state: PickerState) -> None:
        self.live.update(render(state, self.console.size.height), refresh=True)

    def poll(self, timeout: float = POLL_TIMEOUT) -> Optional[str]:
        return self.keys.poll(timeout)
