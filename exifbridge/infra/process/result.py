"""Module: result.py

Author: Michael Economou
Date: 2026-03-04

Result of a one-shot command execution.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Exit status and collected output of a finished command."""

    exit_status: int
    output: str

    @property
    def success(self) -> bool:
        return self.exit_status == 0

    @property
    def failure(self) -> bool:
        return not self.success

    def __str__(self) -> str:
        return f"[{self.exit_status}] {self.output}"
