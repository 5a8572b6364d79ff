import contextlib
import logging
from typing import Any, Callable, ContextManager, List, Mapping, Optional

import typer
from prompt_toolkit.history import FileHistory, History
from rich.console import Console as RichConsole
from rich.panel import Panel
from typing_extensions import Annotated

from embedded_console.argtable import ArgumentSchema, argument
from embedded_console.config import Channel, ConsoleConfig
from embedded_console.console import Console, allocate_console
from embedded_console.errors import ConsoleError, Result, check
from embedded_console.logger import setup_logging
from embedded_console.registry import ConsoleCommand
from embedded_console.response import ResponseBuffer
from embedded_console.runtime_config import (
    LOG_LEVEL_ENV,
    PROMPT_ENV,
    RESPONSE_CAPACITY_ENV,
    RuntimeConfig,
    get_history_file,
    load_envs,
)
from embedded_console.terminal import TerminalChannel

# Global factory function - set by create_app()
_channel_factory: Optional[Callable[[], Channel]] = None


def default_channel_factory() -> Channel:
    """Default factory: the process's own terminal."""
    return TerminalChannel()


def build_demo_commands(console: Console) -> List[ConsoleCommand]:
    """Commands the host program registers on top of the built-in help."""

    def cmd_add(
        command: ConsoleCommand, response: ResponseBuffer, args: Mapping[str, Any]
    ) -> Result:
        print(f"The result is: {args['a'] + args['b']}", file=response)
        return Result.OK

    def cmd_echo(
        command: ConsoleCommand, response: ResponseBuffer, args: Mapping[str, Any]
    ) -> Result:
        print(" ".join(args["words"]), file=response)
        return Result.OK

    def cmd_exit(
        command: ConsoleCommand, response: ResponseBuffer, args: Mapping[str, Any]
    ) -> Result:
        response.write("Exiting...\n")
        console.stop()
        return Result.OK

    return [
        ConsoleCommand(
            name="add",
            handler=cmd_add,
            help="Add two integers and print the sum.",
            hint="<a> <b>",
            schema=ArgumentSchema(
                argument("a", type=int, help="First number"),
                argument("b", type=int, help="Second number"),
            ),
        ),
        ConsoleCommand(
            name="echo",
            handler=cmd_echo,
            help="Print the arguments back.",
            hint="[words...]",
            schema=ArgumentSchema(
                argument("words", nargs=-1, required=False, help="Words to print"),
            ),
        ),
        ConsoleCommand(
            name="exit",
            handler=cmd_exit,
            help="Leave the console.",
        ),
    ]


def _open_history(cfg: RuntimeConfig) -> Optional[History]:
    if cfg.history_file is None:
        return None
    cfg.history_file.parent.mkdir(parents=True, exist_ok=True)
    return FileHistory(str(cfg.history_file))


def main(
    prompt: Annotated[
        str,
        typer.Option("--prompt", envvar=PROMPT_ENV, help="Prompt text"),
    ] = "cli> ",
    capacity: Annotated[
        int,
        typer.Option(
            "--capacity",
            envvar=RESPONSE_CAPACITY_ENV,
            help="Maximum characters per command response; 0 means unbounded",
        ),
    ] = 2000,
    history: Annotated[
        bool,
        typer.Option("--history/--no-history", help="Keep line history on disk"),
    ] = True,
    log_level: Annotated[
        str,
        typer.Option("--log-level", envvar=LOG_LEVEL_ENV, help="Log file level"),
    ] = "INFO",
) -> None:
    """EMBEDDED CONSOLE - interactive command console on this terminal"""
    cfg = RuntimeConfig(
        prompt=prompt,
        response_capacity=capacity if capacity > 0 else None,
        history_file=get_history_file() if history else None,
        log_level=log_level.upper(),
    )
    setup_logging(cfg.log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting console with prompt {cfg.prompt!r}")

    factory = _channel_factory or default_channel_factory
    channel = factory()
    console = allocate_console()
    config = ConsoleConfig.from_channel(
        channel,
        prompt=cfg.prompt,
        response_capacity=cfg.response_capacity,
        history=_open_history(cfg),
    )

    try:
        check(console.initialize(config), "initialize")
        for command in build_demo_commands(console):
            check(console.register_command(command), f"register {command.name}")

        RichConsole(stderr=True).print(
            Panel(
                "[bold cyan]EMBEDDED CONSOLE[/bold cyan]\n\n"
                f"[dim]Commands:[/dim] [dim cyan]{', '.join(console.registry.names())}[/dim cyan]",
                expand=False,
            )
        )

        raw_mode: Optional[Callable[[], ContextManager[None]]] = getattr(
            channel, "raw_mode", None
        )
        with raw_mode() if raw_mode else contextlib.nullcontext():
            check(console.run(), "run")
    except ConsoleError as e:
        logger.error(str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        console.deinitialize()


def create_app(channel_factory: Optional[Callable[[], Channel]] = None) -> typer.Typer:
    """
    Create and configure the Typer application.

    Args:
        channel_factory: Factory function to create the character channel

    Returns:
        Typer application
    """
    # Load host settings from .env if not already set in the environment
    load_envs()

    global _channel_factory
    _channel_factory = channel_factory

    app = typer.Typer(rich_markup_mode=None)
    app.command()(main)
    return app


app = create_app()


if __name__ == "__main__":
    app()
