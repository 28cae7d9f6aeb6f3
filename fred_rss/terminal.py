"""Raw terminal handling: cbreak mode, alternate screen and key polling."""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty
from typing import Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class TerminalSession:
    """Put the terminal into cbreak mode on an alternate screen.

    The previous terminal settings are restored on exit whatever the exit
    path, including exceptions raised inside the ``with`` block.
    """

    def __init__(self, console: Optional[Console] = None, stdin=None) -> None:
        self.console = console or Console()
        self.stdin = stdin or sys.stdin
        self._fd: Optional[int] = None
        self._saved = None
        self._screen = None

    def __enter__(self) -> "TerminalSession":
        self._fd = self.stdin.fileno()
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        try:
            self._screen = self.console.screen(hide_cursor=True)
            self._screen.__enter__()
        except BaseException:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._screen = None
            raise
        logger.debug("Terminal switched to cbreak mode")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._screen is not None:
                self._screen.__exit__(exc_type, exc, tb)
        finally:
            if self._fd is not None and self._saved is not None:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self.console.show_cursor(True)
            logger.debug("Terminal settings restored")

    def read_key(self, timeout: float) -> Optional[str]:
        """Wait up to ``timeout`` seconds for a key; None when nothing arrived."""
        fd = self._fd if self._fd is not None else self.stdin.fileno()
        return read_key(fd, timeout)


def read_key(fd: int, timeout: float) -> Optional[str]:
    """Read one key press (or one escape sequence) from ``fd``."""
    try:
        ready, _, _ = select.select([fd], [], [], max(timeout, 0.0))
    except (OSError, InterruptedError):
        return None
    if not ready:
        return None

    try:
        data = os.read(fd, 1)
    except OSError:
        return None
    if not data:
        return None

    if data == b"\x1b":
        # Arrow keys arrive as ESC [ X or ESC O X; a lone ESC has no follow-up.
        for _ in range(2):
            more, _, _ = select.select([fd], [], [], 0.01)
            if not more:
                break
            data += os.read(fd, 1)
    elif data[0] & 0x80:
        data += _read_utf8_tail(fd, data[0])

    return data.decode("utf-8", errors="replace")


def _read_utf8_tail(fd: int, first: int) -> bytes:
    if first & 0xE0 == 0xC0:
        remaining = 1
    elif first & 0xF0 == 0xE0:
        remaining = 2
    elif first & 0xF8 == 0xF0:
        remaining = 3
    else:
        return b""
    try:
        return os.read(fd, remaining)
    except OSError:
        return b""
