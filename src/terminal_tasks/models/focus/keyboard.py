"""Non-blocking keyboard input for the terminal UI."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from collections import deque

# Longest sequences first so prefixes do not shadow them.
ESCAPE_SEQUENCES = {
    "\x1b[1~": "home",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageup",
    "\x1b[6~": "pagedown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[Z": "backtab",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
}

CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
    "\x1b": "esc",
}


def decode_keys(data: str) -> list[str]:
    """Split raw terminal input into normalized key names.

    Printable characters map to themselves; escape sequences and control
    bytes map to names such as ``"up"``, ``"enter"`` or ``"esc"``. Unknown
    escape sequences are dropped.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        char = data[i]
        if char == "\x1b" and i + 1 < len(data):
            for sequence in sorted(ESCAPE_SEQUENCES, key=len, reverse=True):
                if data.startswith(sequence, i):
                    keys.append(ESCAPE_SEQUENCES[sequence])
                    i += len(sequence)
                    break
            else:
                if data[i + 1] in "[O":
                    # Skip an unrecognized CSI/SS3 sequence up to its final byte.
                    j = i + 2
                    while j < len(data) and not ("@" <= data[j] <= "~"):
                        j += 1
                    i = j + 1
                else:
                    keys.append("esc")
                    i += 1
            continue
        if char in CONTROL_KEYS:
            keys.append(CONTROL_KEYS[char])
        elif char.isprintable():
            keys.append(char)
        i += 1
    return keys


class KeyboardHandler:
    """Reads decoded keys from stdin with a bounded wait."""

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._pending: deque[str] = deque()
        self._setup()

    def _setup(self):
        """Put the terminal in cbreak mode so keys arrive unbuffered."""
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # Not a TTY (e.g. piped input)
            self.old_settings = None

    def read_key(self, timeout: float = 0.05) -> str | None:
        """Return the next key, waiting at most *timeout* seconds."""
        if self._pending:
            return self._pending.popleft()

        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        data = os.read(self.fd, 64).decode("utf-8", errors="ignore")
        self._pending.extend(decode_keys(data))
        if self._pending:
            return self._pending.popleft()
        return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            self.old_settings = None

    def __enter__(self) -> KeyboardHandler:
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
