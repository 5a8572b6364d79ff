"""
Command descriptors and the ordered registry a console dispatches from.
"""

import logging
from dataclasses import dataclass, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterator,
    List,
    Mapping,
    Optional,
)

from embedded_console.argtable import ArgumentSchema
from embedded_console.errors import Result

if TYPE_CHECKING:
    from embedded_console.response import ResponseBuffer

logger = logging.getLogger(__name__)

CommandHandler = Callable[
    ["ConsoleCommand", "ResponseBuffer", Mapping[str, Any]], Optional[Result]
]


@dataclass(frozen=True)
class ConsoleCommand:
    """
    One command a console can dispatch to.

    Attributes:
        name: Token that selects the command; no whitespace, unique per console.
        handler: Called as ``handler(command, response, args)``.
        help: Summary shown by ``help``; commands without it are hidden there.
        hint: Display-only usage hint printed next to the name.
        schema: Argument schema validated before the handler runs.
    """

    name: str
    handler: Optional[CommandHandler]
    help: Optional[str] = None
    hint: Optional[str] = None
    schema: Optional[ArgumentSchema] = None


def validate_command(command: Optional[ConsoleCommand]) -> Result:
    """Check that ``command`` has a usable name and a callable handler."""
    if command is None:
        return Result.PARAMETER_ERROR
    name = command.name
    if not isinstance(name, str) or not name or any(c.isspace() for c in name):
        return Result.PARAMETER_ERROR
    if command.handler is None or not callable(command.handler):
        return Result.PARAMETER_ERROR
    return Result.OK


def _copy_command(command: ConsoleCommand) -> ConsoleCommand:
    return replace(command)


class CommandRegistry:
    """Insertion-ordered collection of commands with unique names."""

    def __init__(self) -> None:
        self._commands: List[ConsoleCommand] = []

    def add(self, command: Optional[ConsoleCommand]) -> Result:
        """Append a copy of ``command`` to the tail of the registry."""
        result = validate_command(command)
        if command is None or result is not Result.OK:
            logger.warning("Rejected malformed command: %r", command)
            return result
        if self.find(command.name) is not None:
            logger.warning("Command %s is already registered", command.name)
            return Result.PARAMETER_ERROR
        try:
            entry = _copy_command(command)
        except MemoryError:
            logger.error("Out of memory registering command %s", command.name)
            return Result.NO_MEMORY
        self._commands.append(entry)
        logger.debug("Registered command %s", entry.name)
        return Result.OK

    def find(self, name: str) -> Optional[ConsoleCommand]:
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def names(self) -> List[str]:
        return [command.name for command in self._commands]

    def clear(self) -> None:
        self._commands.clear()

    def __iter__(self) -> Iterator[ConsoleCommand]:
        # Snapshot so a handler may register commands while help iterates.
        return iter(list(self._commands))

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None
