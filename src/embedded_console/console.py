"""
Console engine: lifecycle state machine, run loop and command dispatch.

A host allocates a Console, initializes it with a ConsoleConfig, registers
commands and calls run(). Every operation reports its outcome as a Result.
"""

import logging
import signal
import threading
from dataclasses import replace
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from embedded_console.config import ConsoleConfig
from embedded_console.errors import Result
from embedded_console.help_command import HELP_COMMAND_NAME, make_help_command
from embedded_console.interrupt_handler import InterruptHandler
from embedded_console.line_assembler import LineAssembler
from embedded_console.registry import CommandRegistry, ConsoleCommand
from embedded_console.response import ResponseBuffer

logger = logging.getLogger(__name__)


class ConsoleState(str, Enum):
    """Lifecycle states of a console."""

    allocated = "allocated"
    initialized = "initialized"


class Console:
    """Character-driven command console over a caller-supplied channel."""

    def __init__(self) -> None:
        self._state = ConsoleState.allocated
        self._config: Optional[ConsoleConfig] = None
        self._registry = CommandRegistry()
        self._assembler: Optional[LineAssembler] = None
        self._interrupts = InterruptHandler()
        self._stop_requested = threading.Event()

    @property
    def state(self) -> ConsoleState:
        return self._state

    @property
    def config(self) -> Optional[ConsoleConfig]:
        return self._config

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    def initialize(self, config: Optional[ConsoleConfig]) -> Result:
        """Validate and copy ``config``, bind interrupts and register help."""
        if config is None:
            return Result.PARAMETER_ERROR
        if self._state is not ConsoleState.allocated:
            return Result.INVALID_STATE
        if not config.is_complete():
            logger.error("Console configuration is missing a channel callback")
            return Result.PARAMETER_ERROR
        if config.response_capacity is not None and config.response_capacity < 0:
            logger.error("Response capacity must be non-negative")
            return Result.PARAMETER_ERROR

        self._config = replace(config)
        self._assembler = LineAssembler(
            self._config.prompt, self._emit, history=self._config.history
        )
        self._interrupts.reset()
        self._stop_requested.clear()

        if self._config.bind_interrupt_signal:
            try:
                self._interrupts.bind()
            except (ValueError, OSError) as e:
                logger.error(f"Failed to bind interrupt signal: {e}")
                return Result.GENERIC_ERROR

        self._state = ConsoleState.initialized
        logger.info("Console initialized")

        # The state has already moved on; a failure here needs deinitialize().
        return self._registry.add(make_help_command(self._registry))

    def register_command(self, command: Optional[ConsoleCommand]) -> Result:
        if self._state is not ConsoleState.initialized:
            return Result.INVALID_STATE
        return self._registry.add(command)

    def find_command(self, name: str) -> Optional[ConsoleCommand]:
        return self._registry.find(name)

    def stop(self) -> None:
        """Ask run() to return at the top of its next iteration."""
        self._stop_requested.set()

    def interrupt(self, signum: int = signal.SIGINT) -> None:
        """Request cancellation of the line being typed."""
        self._interrupts.trigger(signum)

    def run(self) -> Result:
        """Read characters and dispatch completed lines until stopped or EOF."""
        if self._state is not ConsoleState.initialized:
            return Result.INVALID_STATE
        config, assembler = self._config, self._assembler
        if config is None or assembler is None or config.read_char is None:
            return Result.INVALID_STATE
        read_char = config.read_char

        logger.info("Console run loop started")
        assembler.prompt()
        while not self._stop_requested.is_set():
            signum = self._interrupts.consume()
            if signum is not None:
                logger.info("Interrupt %d received, cancelling line", signum)
                assembler.cancel_line()
                if config.on_interrupt is not None:
                    config.on_interrupt(signum)
                assembler.prompt()
                continue

            try:
                ch = read_char()
            except EOFError:
                ch = ""
            except Exception:
                logger.exception("Reading from the input channel failed")
                return Result.GENERIC_ERROR
            if not ch:
                logger.info("Input channel closed")
                return Result.OK

            if not assembler.insert_char(ch):
                continue

            response = self.execute(assembler.argv)
            if response:
                self._emit(response)
            if not self._stop_requested.is_set():
                assembler.prompt()

        logger.info("Console run loop stopped")
        self._stop_requested.clear()
        return Result.OK

    def execute(self, argv: Sequence[str]) -> str:
        """Dispatch one tokenized line and return the text to relay."""
        if not argv:
            return ""
        name = argv[0]
        command = self._registry.find(name)
        if command is None:
            logger.info("Command not found: %s", name)
            return (
                f"error: command not found: {name}\n"
                f"Type '{HELP_COMMAND_NAME}' to see available commands.\n"
            )

        args: Mapping[str, Any] = {}
        if command.schema is not None:
            parsed = command.schema.parse(argv)
            if parsed.error_count:
                logger.info(
                    "Command %s rejected with %d argument error(s)",
                    name,
                    parsed.error_count,
                )
                errors = "".join(f"error: {msg}\n" for msg in parsed.errors)
                return f"{errors}Usage: {command.schema.render_usage(name)}\n"
            args = parsed.values

        capacity = self._config.response_capacity if self._config else None
        response = ResponseBuffer(capacity)
        handler = command.handler
        if handler is None:
            return f"error: {name}: command has no handler\n"
        try:
            result = handler(command, response, args)
        except Exception as e:
            logger.exception("Command %s raised", name)
            return f"{response.getvalue()}error: {name}: {e}\n"

        if result is not None and result != Result.OK:
            logger.warning("Command %s returned %r", name, result)

        text = response.getvalue()
        if response.truncated:
            logger.warning("Response of %s truncated at %s characters", name, capacity)
            text += f"\n[response truncated at {capacity} characters]\n"
        return text

    def deinitialize(self) -> Result:
        """Drop every registered command and return to the allocated state."""
        self._registry.clear()
        self._interrupts.unbind()
        self._interrupts.reset()
        self._assembler = None
        self._stop_requested.clear()
        self._state = ConsoleState.allocated
        logger.info("Console deinitialized")
        return Result.OK

    def _emit(self, text: str) -> None:
        if not text or self._config is None or self._config.write_char is None:
            return
        write_char = self._config.write_char
        last = len(text) - 1
        for i, ch in enumerate(text):
            write_char(ch, i == last)


def allocate_console() -> Console:
    """Return a new console in the allocated state."""
    return Console()


def initialize(console: Optional[Console], config: Optional[ConsoleConfig]) -> Result:
    if console is None:
        return Result.PARAMETER_ERROR
    return console.initialize(config)


def register_command(
    console: Optional[Console], command: Optional[ConsoleCommand]
) -> Result:
    if console is None:
        return Result.PARAMETER_ERROR
    return console.register_command(command)


def run(console: Optional[Console]) -> Result:
    if console is None:
        return Result.PARAMETER_ERROR
    return console.run()


def deinitialize(console: Optional[Console]) -> Result:
    if console is None:
        return Result.GENERIC_ERROR
    return console.deinitialize()
