"""Module: command.py

Author: Michael Economou
Date: 2026-03-04

Immutable command line value object and its builder.

Usage:
    cmd = CommandBuilder.builder("exiftool").add_argument("-ver").build()
    str(cmd)  # "exiftool -ver"
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

_EXECUTABLE_MESSAGE = "Command line executable should be defined"
_ARGUMENT_MESSAGE = "Command line argument should be defined if set"


def _check_defined(value: str | None, message: str) -> str:
    if value is None:
        raise TypeError(message)
    if not str(value).strip():
        raise ValueError(message)
    return value


@dataclass(frozen=True)
class Command:
    """A command line: executable followed by its arguments."""

    arguments: tuple[str, ...]

    @property
    def executable(self) -> str:
        return self.arguments[0]

    def __str__(self) -> str:
        return " ".join(self.arguments)


class CommandBuilder:
    """Fluent builder for Command instances."""

    def __init__(self, executable: str, expected_size: int | None = None) -> None:
        self._executable = _check_defined(executable, _EXECUTABLE_MESSAGE)
        self._expected_size = expected_size
        self._arguments: list[str] = []

    @classmethod
    def builder(cls, executable: str, expected_size: int | None = None) -> CommandBuilder:
        """Create a builder for the given executable.

        Args:
            executable: Path or name of the program to run.
            expected_size: Hint of the number of arguments (informational).

        Raises:
            TypeError: If executable is None.
            ValueError: If executable is empty or blank.

        """
        return cls(executable, expected_size)

    def add_argument(self, argument: str, *others: str) -> CommandBuilder:
        """Append one or more arguments, rejecting None/blank values."""
        for arg in (argument, *others):
            self._arguments.append(_check_defined(arg, _ARGUMENT_MESSAGE))
        return self

    def add_all(self, arguments: Iterable[str]) -> CommandBuilder:
        """Append every argument of an iterable."""
        for arg in arguments:
            self.add_argument(arg)
        return self

    def build(self) -> Command:
        return Command((self._executable, *self._arguments))
