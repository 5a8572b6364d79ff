import textwrap
from typing import Any, Mapping

from embedded_console.errors import Result
from embedded_console.registry import CommandRegistry, ConsoleCommand
from embedded_console.response import ResponseBuffer

HELP_COMMAND_NAME = "help"
HELP_COMMAND_TEXT = "Print the list of registered commands"
HELP_WRAP_WIDTH = 78
HELP_INDENT = "  "
NO_HINT = "- NO HINT"


def render_help(registry: CommandRegistry) -> str:
    """Summarize every command that has help text, in registration order."""
    listed = [cmd for cmd in registry if cmd.help]
    if not listed:
        return ""
    width = max(len(cmd.name) for cmd in listed)
    lines = []
    for cmd in listed:
        lines.append(f"{cmd.name:<{width}} {cmd.hint or NO_HINT}\n")
        if cmd.help:
            wrapped = textwrap.fill(
                cmd.help,
                width=HELP_WRAP_WIDTH,
                initial_indent=HELP_INDENT,
                subsequent_indent=HELP_INDENT,
            )
            lines.append(wrapped + "\n")
        if cmd.schema is not None:
            lines.append(cmd.schema.render_glossary())
    return "".join(lines)


def make_help_command(registry: CommandRegistry) -> ConsoleCommand:
    """Build the built-in help command bound to ``registry``."""

    def cmd_help(
        command: ConsoleCommand, response: ResponseBuffer, args: Mapping[str, Any]
    ) -> Result:
        response.write(render_help(registry))
        return Result.OK

    return ConsoleCommand(
        name=HELP_COMMAND_NAME,
        handler=cmd_help,
        help=HELP_COMMAND_TEXT,
    )
