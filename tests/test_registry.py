from typing import Any, Optional

import pytest
from conftest import make_add_command, noop_handler

import embedded_console.registry as registry_module
from embedded_console.errors import Result
from embedded_console.registry import (
    CommandRegistry,
    ConsoleCommand,
    validate_command,
)


def test_validate_command_accepts_name_and_handler() -> None:
    assert validate_command(ConsoleCommand("status", noop_handler)) is Result.OK


@pytest.mark.parametrize(
    "command",
    [
        None,
        ConsoleCommand("", noop_handler),
        ConsoleCommand("two words", noop_handler),
        ConsoleCommand("tab\tname", noop_handler),
        ConsoleCommand("status", None),
        ConsoleCommand("status", "not callable"),  # type: ignore[arg-type]
    ],
)
def test_validate_command_is_strict(command: Optional[ConsoleCommand]) -> None:
    assert validate_command(command) is Result.PARAMETER_ERROR


def test_find_returns_matching_command() -> None:
    registry = CommandRegistry()
    assert registry.add(ConsoleCommand("status", noop_handler)) is Result.OK
    assert registry.add(make_add_command()) is Result.OK

    status = registry.find("status")
    add = registry.find("add")
    assert status is not None and status.name == "status"
    assert add is not None and add.name == "add"
    assert registry.find("missing") is None


def test_find_is_case_sensitive() -> None:
    registry = CommandRegistry()
    registry.add(ConsoleCommand("status", noop_handler))
    assert registry.find("Status") is None
    assert "status" in registry
    assert "Status" not in registry


def test_insertion_order_is_preserved() -> None:
    registry = CommandRegistry()
    for name in ("zeta", "alpha", "mid"):
        registry.add(ConsoleCommand(name, noop_handler))
    assert registry.names() == ["zeta", "alpha", "mid"]
    assert [c.name for c in registry] == ["zeta", "alpha", "mid"]


def test_duplicate_name_is_rejected() -> None:
    registry = CommandRegistry()
    first = ConsoleCommand("status", noop_handler, help="first")
    assert registry.add(first) is Result.OK
    assert (
        registry.add(ConsoleCommand("status", noop_handler, help="second"))
        is Result.PARAMETER_ERROR
    )
    assert len(registry) == 1
    found = registry.find("status")
    assert found is not None and found.help == "first"


def test_malformed_command_leaves_registry_untouched() -> None:
    registry = CommandRegistry()
    registry.add(ConsoleCommand("status", noop_handler))
    assert registry.add(ConsoleCommand("", noop_handler)) is Result.PARAMETER_ERROR
    assert registry.add(None) is Result.PARAMETER_ERROR
    assert registry.names() == ["status"]


def test_out_of_memory_reports_no_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    registry = CommandRegistry()
    registry.add(ConsoleCommand("status", noop_handler))

    def fail(command: Any) -> ConsoleCommand:
        raise MemoryError

    monkeypatch.setattr(registry_module, "_copy_command", fail)
    assert registry.add(ConsoleCommand("other", noop_handler)) is Result.NO_MEMORY
    assert registry.names() == ["status"]


def test_registry_stores_a_copy() -> None:
    registry = CommandRegistry()
    command = ConsoleCommand("status", noop_handler, help="Show status")
    registry.add(command)
    stored = registry.find("status")
    assert stored == command
    assert stored is not command


def test_clear_empties_registry() -> None:
    registry = CommandRegistry()
    registry.add(ConsoleCommand("status", noop_handler))
    registry.clear()
    assert len(registry) == 0
    assert registry.find("status") is None
