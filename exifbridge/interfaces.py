"""
Protocol definitions for exifbridge collaborators.

Author: Michael Economou
Date: 2026-03-04

This module defines the Protocol classes that connect the facade, the
execution strategies and the process layer. Using Protocols allows for
structural subtyping and lets tests substitute fakes and mocks freely.

All protocols are runtime-checkable, meaning isinstance() works with them.

Usage:
    from exifbridge.interfaces import OutputHandler

    class PrintHandler:
        def read_line(self, line: str | None) -> bool:
            print(line)
            return line != "{ready}"

    handler: OutputHandler = PrintHandler()
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from exifbridge.core.version import Version
    from exifbridge.infra.process.command import Command
    from exifbridge.infra.process.process import CommandProcess
    from exifbridge.infra.process.result import CommandResult

__all__ = [
    "CommandExecutor",
    "ExecutionStrategy",
    "OutputHandler",
    "Scheduler",
]


@runtime_checkable
class OutputHandler(Protocol):
    """Consumer of the lines printed by exiftool.

    The handler owns response framing: it decides, line by line, whether
    more lines belong to the current response.
    """

    def read_line(self, line: str | None) -> bool:
        """Handle one decoded line.

        Args:
            line: Line without its terminator (None means no more output).

        Returns:
            True if more lines are expected, False once the response is complete.
        """
        ...


@runtime_checkable
class CommandExecutor(Protocol):
    """Runs commands, either to completion or as persistent processes."""

    def execute(self, command: Command, handler: OutputHandler | None = None) -> CommandResult:
        """Run a command synchronously and return its result.

        Output lines are forwarded to the handler (if any) until it stops.

        Raises:
            OSError: If the process cannot be spawned or read.
        """
        ...

    def start(self, command: Command) -> CommandProcess:
        """Spawn a process and return a handle on its pipes.

        Raises:
            OSError: If the process cannot be spawned.
        """
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Delayed execution of a single pending task (idle eviction)."""

    def start(self, task: Callable[[], None]) -> None:
        """Arm the task after the configured delay, replacing any pending one."""
        ...

    def stop(self) -> None:
        """Cancel the pending task, if any."""
        ...

    def shutdown(self) -> None:
        """Cancel the pending task and release the scheduler's resources."""
        ...


@runtime_checkable
class ExecutionStrategy(Protocol):
    """How a logical exiftool call maps onto OS processes."""

    def execute(
        self,
        executor: CommandExecutor,
        exiftool: str,
        arguments: Sequence[str],
        handler: OutputHandler,
    ) -> None:
        """Run exiftool with the given arguments and feed its output to handler.

        Raises:
            OSError: On any I/O failure with the external process.
        """
        ...

    def is_running(self) -> bool:
        """Return True if a persistent process is currently alive."""
        ...

    def is_supported(self, version: Version) -> bool:
        """Return True if this strategy works with the given exiftool version."""
        ...

    def close(self) -> None:
        """Release any running process; the strategy remains usable."""
        ...

    def shutdown(self) -> None:
        """Release everything for good; the strategy must not be reused."""
        ...
