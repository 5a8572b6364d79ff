"""
POSIX terminal channel for running a console on the controlling TTY.
"""

import contextlib
import logging
import sys
from typing import Iterator, Optional, TextIO

logger = logging.getLogger(__name__)

CTRL_D = "\x04"


class TerminalChannel:
    """Channel over text streams, translating newlines for raw-mode terminals."""

    def __init__(
        self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._raw = False

    def read_char(self) -> str:
        ch = self._stdin.read(1)
        if ch == CTRL_D:
            return ""
        return ch

    def write_char(self, ch: str, is_final: bool) -> None:
        if ch == "\n" and self._raw:
            ch = "\r\n"
        self._stdout.write(ch)
        if is_final:
            self._stdout.flush()

    def on_interrupt(self, signum: int) -> None:
        logger.info("Terminal received interrupt %d", signum)

    def isatty(self) -> bool:
        try:
            return self._stdin.isatty()
        except (AttributeError, ValueError):
            return False

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Put the terminal into raw mode while the console runs, if it is a TTY."""
        if not self.isatty():
            yield
            return

        import termios
        import tty

        fd = self._stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            self._raw = True
            yield
        finally:
            self._raw = False
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
