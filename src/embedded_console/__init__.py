"""
Input-channel-agnostic interactive command console.
"""

from embedded_console.argtable import ArgumentSchema, ParseResult, argument, option
from embedded_console.config import Channel, ConsoleConfig, init_parameters
from embedded_console.console import (
    Console,
    ConsoleState,
    allocate_console,
    deinitialize,
    initialize,
    register_command,
    run,
)
from embedded_console.errors import ConsoleError, Result, check
from embedded_console.registry import (
    CommandRegistry,
    ConsoleCommand,
    validate_command,
)
from embedded_console.response import ResponseBuffer

__all__ = [
    "ArgumentSchema",
    "Channel",
    "CommandRegistry",
    "Console",
    "ConsoleCommand",
    "ConsoleConfig",
    "ConsoleError",
    "ConsoleState",
    "ParseResult",
    "ResponseBuffer",
    "Result",
    "allocate_console",
    "argument",
    "check",
    "deinitialize",
    "init_parameters",
    "initialize",
    "option",
    "register_command",
    "run",
    "validate_command",
]
