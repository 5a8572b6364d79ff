"""
Console configuration: the three channel callbacks plus engine tunables.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from prompt_toolkit.history import History

from embedded_console.errors import Result
from embedded_console.response import DEFAULT_RESPONSE_CAPACITY

ReadChar = Callable[[], str]
WriteChar = Callable[[str, bool], None]
InterruptCallback = Callable[[int], None]

DEFAULT_PROMPT = "cli> "


class Channel(Protocol):
    """Character transport supplied by the embedding application."""

    def read_char(self) -> str:
        """Block until the next character arrives; return "" at end of input."""
        ...

    def write_char(self, ch: str, is_final: bool) -> None:
        """Emit one character; flush when ``is_final`` is set."""
        ...

    def on_interrupt(self, signum: int) -> None:
        """Called when a cancellation request was received."""
        ...


@dataclass
class ConsoleConfig:
    """
    Settings copied into a console by Console.initialize().

    Attributes:
        read_char: Blocking single-character input callback.
        write_char: Single-character output callback, flushes on the final character.
        on_interrupt: Notified with the signal number of a cancellation request.
        prompt: Text emitted before each line.
        response_capacity: Maximum characters a handler may write (None is unbounded).
        history: prompt_toolkit history storage for line recall.
        bind_interrupt_signal: Route SIGINT to the console while it is initialized.
    """

    read_char: Optional[ReadChar] = None
    write_char: Optional[WriteChar] = None
    on_interrupt: Optional[InterruptCallback] = None
    prompt: str = DEFAULT_PROMPT
    response_capacity: Optional[int] = DEFAULT_RESPONSE_CAPACITY
    history: Optional[History] = None
    bind_interrupt_signal: bool = True

    @classmethod
    def from_channel(cls, channel: Channel, **kwargs: Any) -> "ConsoleConfig":
        """
        Build a ConsoleConfig whose callbacks are the channel's methods.
        """
        return cls(
            read_char=channel.read_char,
            write_char=channel.write_char,
            on_interrupt=channel.on_interrupt,
            **kwargs,
        )

    def is_complete(self) -> bool:
        return (
            self.read_char is not None
            and self.write_char is not None
            and self.on_interrupt is not None
        )


def init_parameters(config: Optional[ConsoleConfig]) -> Result:
    """Reset the channel callbacks of ``config`` to unset."""
    if config is None:
        return Result.PARAMETER_ERROR
    config.read_char = None
    config.write_char = None
    config.on_interrupt = None
    return Result.OK
