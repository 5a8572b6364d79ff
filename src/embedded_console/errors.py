"""
Outcome codes shared by every console operation.

Engine operations report failures by returning a Result instead of raising.
ConsoleError and check() exist for hosts that would rather turn a failed
lifecycle call into an exception.
"""

from enum import IntEnum
from typing import Optional


class Result(IntEnum):
    """Closed set of console outcome codes."""

    OK = 0
    GENERIC_ERROR = 1
    NO_MEMORY = 2
    INVALID_STATE = 3
    PARAMETER_ERROR = 4

    @property
    def ok(self) -> bool:
        return self is Result.OK


class ConsoleError(Exception):
    """Raised by check() when a console operation did not succeed."""

    def __init__(self, result: Result, message: Optional[str] = None) -> None:
        self.result = result
        super().__init__(message or f"console operation failed: {result.name}")


def check(result: Result, action: str = "console operation") -> None:
    """Raise ConsoleError unless ``result`` is Result.OK."""
    if result is not Result.OK:
        raise ConsoleError(result, f"{action} failed: {result.name}")
