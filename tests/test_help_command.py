from typing import List

from conftest import make_add_command, noop_handler

from embedded_console.console import Console
from embedded_console.help_command import (
    HELP_WRAP_WIDTH,
    NO_HINT,
    make_help_command,
    render_help,
)
from embedded_console.registry import CommandRegistry, ConsoleCommand


def summary_lines(text: str) -> List[str]:
    return [line for line in text.splitlines() if line and not line.startswith(" ")]


def test_commands_without_help_are_omitted() -> None:
    registry = CommandRegistry()
    registry.add(make_help_command(registry))
    registry.add(ConsoleCommand("status", noop_handler, help="Show status"))
    registry.add(ConsoleCommand("reboot", noop_handler, help="Restart the device"))
    registry.add(ConsoleCommand("secret", noop_handler))
    registry.add(ConsoleCommand("blank", noop_handler, help=""))

    lines = summary_lines(render_help(registry))
    assert len(lines) == 3
    assert [line.split()[0] for line in lines] == ["help", "status", "reboot"]


def test_hint_or_placeholder_follows_padded_name() -> None:
    registry = CommandRegistry()
    registry.add(ConsoleCommand("go", noop_handler, help="Go", hint="<where>"))
    registry.add(ConsoleCommand("status", noop_handler, help="Show status"))

    lines = summary_lines(render_help(registry))
    assert lines == ["go     <where>", f"status {NO_HINT}"]


def test_help_text_is_wrapped_and_indented() -> None:
    registry = CommandRegistry()
    long_help = " ".join(["word"] * 60)
    registry.add(ConsoleCommand("talk", noop_handler, help=long_help))

    body = render_help(registry).splitlines()[1:]
    assert len(body) > 1
    assert all(line.startswith("  ") for line in body)
    assert all(len(line) <= HELP_WRAP_WIDTH for line in body)


def test_schema_glossary_is_included() -> None:
    registry = CommandRegistry()
    registry.add(make_add_command())

    text = render_help(registry)
    assert "<a>  First number" in text
    assert "<b>  Second number" in text


def test_empty_registry_renders_nothing() -> None:
    assert render_help(CommandRegistry()) == ""


def test_help_command_reads_registry_live(console: Console) -> None:
    before = console.execute(["help"])
    console.register_command(make_add_command())
    after = console.execute(["help"])

    assert "help " in before
    assert "add" not in before
    assert "Add two integers and print the sum." in after
