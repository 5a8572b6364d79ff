import logging
from collections import deque
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple

import pytest

from embedded_console.config import ConsoleConfig
from embedded_console.console import Console
from embedded_console.errors import Result
from embedded_console.registry import ConsoleCommand
from embedded_console.response import ResponseBuffer


class FakeChannel:
    """Scripted channel: serves characters from a string and records output."""

    def __init__(
        self,
        script: str = "",
        on_read: Optional[Callable[[int], None]] = None,
    ):
        self._input = deque(script)
        self._reads = 0
        self.on_read = on_read
        self.writes: List[Tuple[str, bool]] = []
        self.interrupts: List[int] = []

    def read_char(self) -> str:
        if not self._input:
            return ""
        ch = self._input.popleft()
        self._reads += 1
        if self.on_read is not None:
            self.on_read(self._reads)
        return ch

    def write_char(self, ch: str, is_final: bool) -> None:
        self.writes.append((ch, is_final))

    def on_interrupt(self, signum: int) -> None:
        self.interrupts.append(signum)

    @property
    def text(self) -> str:
        return "".join(ch for ch, _ in self.writes)

    @property
    def remaining(self) -> str:
        return "".join(self._input)


def make_add_command(calls: Optional[List[Mapping[str, Any]]] = None) -> ConsoleCommand:
    from embedded_console.argtable import ArgumentSchema, argument

    def cmd_add(
        command: ConsoleCommand, response: ResponseBuffer, args: Mapping[str, Any]
    ) -> Result:
        if calls is not None:
            calls.append(dict(args))
        response.write(f"The result is: {args['a'] + args['b']}\n")
        return Result.OK

    return ConsoleCommand(
        name="add",
        handler=cmd_add,
        help="Add two integers and print the sum.",
        hint="<a> <b>",
        schema=ArgumentSchema(
            argument("a", type=int, help="First number"),
            argument("b", type=int, help="Second number"),
        ),
    )


def noop_handler(
    command: ConsoleCommand, response: ResponseBuffer, args: Mapping[str, Any]
) -> Result:
    return Result.OK


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Any, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep XDG directories and console settings out of the real home."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for key in (
        "EMBEDDED_CONSOLE_PROMPT",
        "EMBEDDED_CONSOLE_RESPONSE_CAPACITY",
        "EMBEDDED_CONSOLE_LOG_LEVEL",
    ):
        # setenv first so the original value is restored even if a test
        # writes os.environ directly.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    yield
    pkg_logger = logging.getLogger("embedded_console")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.propagate = True


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def config(channel: FakeChannel) -> ConsoleConfig:
    return ConsoleConfig.from_channel(channel)


@pytest.fixture
def console(config: ConsoleConfig) -> Iterator[Console]:
    """An initialized console, torn down after the test."""
    c = Console()
    assert c.initialize(config) is Result.OK
    yield c
    c.deinitialize()
