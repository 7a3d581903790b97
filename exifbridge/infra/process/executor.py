"""Module: executor.py

Author: Michael Economou
Date: 2026-03-05

Default command executor backed by subprocess/psutil.

- execute(): one-shot run, stderr merged into stdout, output streamed
  through the line reader and collected into a CommandResult.
- start(): persistent process with three pipes, wrapped in a CommandProcess.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

import psutil

from exifbridge.infra.process.io import close_quietly, read_input_stream
from exifbridge.infra.process.process import BR, CommandProcess
from exifbridge.infra.process.result import CommandResult
from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from exifbridge.infra.process.command import Command
    from exifbridge.interfaces import OutputHandler

logger = get_cached_logger(__name__)


class _CollectingHandler:
    """Collect every output line, forwarding them to a delegate until it stops.

    Lines after the delegate stopped are still drained so the one-shot
    process can run to completion instead of dying on a closed pipe.
    """

    def __init__(self, delegate: OutputHandler | None) -> None:
        self._delegate = delegate
        self._forwarding = delegate is not None
        self.lines: list[str] = []

    def read_line(self, line: str | None) -> bool:
        if line is not None:
            self.lines.append(line)
        if self._forwarding and self._delegate is not None:
            self._forwarding = self._delegate.read_line(line)
        return True


class DefaultCommandExecutor:
    """Run exiftool commands as OS processes."""

    def execute(self, command: Command, handler: OutputHandler | None = None) -> CommandResult:
        """Run a command to completion.

        Args:
            command: Command to run.
            handler: Optional line handler receiving stdout+stderr lines.

        Returns:
            CommandResult with the exit status and all output lines.

        Raises:
            OSError: If the process cannot be spawned or its output read.

        """
        logger.debug("[CommandExecutor] Executing: %s", command, extra={"dev_only": True})

        proc = subprocess.Popen(
            list(command.arguments),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )

        collector = _CollectingHandler(handler)
        try:
            read_input_stream(proc.stdout, collector)
        finally:
            close_quietly(proc.stdout)
            exit_status = proc.wait()

        result = CommandResult(exit_status, BR.join(collector.lines))
        if result.failure:
            logger.debug(
                "[CommandExecutor] Command exited with status %d: %s",
                exit_status,
                command,
                extra={"dev_only": True},
            )
        return result

    def start(self, command: Command) -> CommandProcess:
        """Spawn a persistent process and return its handle.

        Raises:
            OSError: If the process cannot be spawned.

        """
        proc = psutil.Popen(
            list(command.arguments),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        logger.info("[CommandExecutor] Started process %d: %s", proc.pid, command)
        return CommandProcess(proc.stdout, proc.stdin, proc.stderr, process=proc)
