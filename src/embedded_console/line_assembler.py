"""
Turns a raw character stream into completed, tokenized command lines.

Editing state lives in a prompt_toolkit Buffer; recalled lines come from a
prompt_toolkit History. Everything the user should see is pushed through the
``echo`` callback, so the assembler works over any character channel.
"""

import logging
import shlex
from typing import Callable, List, Optional

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.history import History, InMemoryHistory

logger = logging.getLogger(__name__)

CTRL_C = "\x03"
ESC = "\x1b"
BACKSPACE_CHARS = ("\b", "\x7f")
ENTER_CHARS = ("\r", "\n")


def split_line(text: str) -> List[str]:
    """Tokenize a line with shell-style quoting."""
    try:
        return shlex.split(text)
    except ValueError:
        # Unbalanced quotes: keep the plain whitespace tokens.
        logger.debug("Could not shell-split %r, using whitespace split", text)
        return text.split()


class LineAssembler:
    """Line editor fed one character at a time."""

    def __init__(
        self,
        prompt: str,
        echo: Callable[[str], None],
        history: Optional[History] = None,
    ) -> None:
        self._prompt = prompt
        self._echo = echo
        self._buffer = Buffer(multiline=False)
        self._history = history if history is not None else InMemoryHistory()
        # load_history_strings() yields newest first.
        self._entries: List[str] = list(
            reversed(list(self._history.load_history_strings()))
        )
        self._history_index: Optional[int] = None
        self._draft = ""
        self._escape = ""
        self._last_char = ""
        self._argv: List[str] = []

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def argv(self) -> List[str]:
        """Tokens of the most recently completed line."""
        return list(self._argv)

    @property
    def history_entries(self) -> List[str]:
        return list(self._entries)

    def prompt(self) -> None:
        self._echo(self._prompt)

    def insert_char(self, ch: str) -> bool:
        """Feed one character; return True once a complete line is ready."""
        previous, self._last_char = self._last_char, ch

        if self._escape:
            if len(self._escape) > 1 or ch in "[O":
                self._escape += ch
                self._handle_escape()
                return False
            # A lone ESC is dropped and ch is handled as ordinary input.
            self._escape = ""

        if ch in ENTER_CHARS:
            if ch == "\n" and previous == "\r":
                return False
            self._complete_line()
            return True
        if ch == CTRL_C:
            self.cancel_line()
            return True
        if ch == ESC:
            self._escape = ch
        elif ch in BACKSPACE_CHARS:
            self._backspace()
        elif ch.isprintable():
            self._insert(ch)
        return False

    def cancel_line(self) -> None:
        """Drop the partial line; the completed line is left empty."""
        self._echo("^C\n")
        self._argv = []
        self._escape = ""
        self._reset_buffer()

    def _complete_line(self) -> None:
        text = self._buffer.text
        self._echo("\n")
        self._argv = split_line(text)
        if text.strip() and (not self._entries or self._entries[-1] != text):
            self._entries.append(text)
            self._history.store_string(text)
        self._reset_buffer()

    def _reset_buffer(self) -> None:
        self._buffer.reset()
        self._history_index = None
        self._draft = ""

    def _insert(self, ch: str) -> None:
        tail = self._buffer.document.text_after_cursor
        self._buffer.insert_text(ch)
        self._echo(ch + tail + "\b" * len(tail))

    def _backspace(self) -> None:
        if self._buffer.cursor_position == 0:
            return
        self._buffer.delete_before_cursor()
        tail = self._buffer.document.text_after_cursor
        self._echo("\b" + tail + " " + "\b" * (len(tail) + 1))

    def _handle_escape(self) -> None:
        seq = self._escape
        if len(seq) < 3 or not (seq[-1].isalpha() or seq[-1] == "~"):
            return
        self._escape = ""
        key = seq[-1]
        if key == "A":
            self._recall(-1)
        elif key == "B":
            self._recall(1)
        elif key == "C":
            self._move_cursor(1)
        elif key == "D":
            self._move_cursor(-1)
        elif key == "H":
            self._move_cursor(-self._buffer.cursor_position)
        elif key == "F":
            self._move_cursor(len(self._buffer.text) - self._buffer.cursor_position)

    def _move_cursor(self, offset: int) -> None:
        position = self._buffer.cursor_position
        target = max(0, min(len(self._buffer.text), position + offset))
        if target < position:
            self._echo("\b" * (position - target))
        elif target > position:
            self._echo(self._buffer.text[position:target])
        self._buffer.cursor_position = target

    def _recall(self, step: int) -> None:
        if not self._entries:
            return
        if self._history_index is None:
            if step > 0:
                return
            self._draft = self._buffer.text
            index: Optional[int] = len(self._entries) - 1
        else:
            index = self._history_index + step
            if index < 0:
                index = 0
            elif index >= len(self._entries):
                index = None
        self._history_index = index
        self._replace_text(self._draft if index is None else self._entries[index])

    def _replace_text(self, text: str) -> None:
        old = self._buffer.text
        self._move_cursor(len(old) - self._buffer.cursor_position)
        pad = max(len(old) - len(text), 0)
        self._echo("\b" * len(old) + text + " " * pad + "\b" * pad)
        self._buffer.document = Document(text, cursor_position=len(text))
