"""Process layer: command values, process handles, line reader and executor.

Author: Michael Economou
Date: 2026-03-05
"""

from exifbridge.infra.process.command import Command, CommandBuilder
from exifbridge.infra.process.executor import DefaultCommandExecutor
from exifbridge.infra.process.io import close_quietly, read_input_stream
from exifbridge.infra.process.process import CommandProcess
from exifbridge.infra.process.result import CommandResult

__all__ = [
    "Command",
    "CommandBuilder",
    "CommandProcess",
    "CommandResult",
    "DefaultCommandExecutor",
    "close_quietly",
    "read_input_stream",
]
