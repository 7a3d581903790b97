"""
Module: test_orphan_cleanup.py

Author: Michael Economou
Date: 2026-03-10

Tests for the orphaned exiftool process scan (psutil is mocked).
"""

from __future__ import annotations

from unittest.mock import MagicMock, PropertyMock, patch

import psutil

from exifbridge.infra.process import cleanup


def fake_proc(name: str | None, cmdline: list[str] | None, *, running: list[bool] | None = None):
    proc = MagicMock()
    proc.info = {"pid": 1, "name": name, "cmdline": cmdline}
    proc.is_running.side_effect = running if running is not None else [False] * 10
    return proc


class TestFindOrphanedProcesses:
    """Tests for find_orphaned_exiftool_processes."""

    def test_matches_by_name_and_command_line(self) -> None:
        """Test both matching rules and that unrelated processes are ignored."""
        by_name = fake_proc("exiftool", None)
        by_cmdline = fake_proc("perl", ["perl", "/usr/bin/exiftool", "-stay_open", "True"])
        one_shot_perl = fake_proc("perl", ["perl", "/usr/bin/exiftool", "-ver"])
        other = fake_proc("bash", ["bash"])

        with patch.object(
            cleanup.psutil, "process_iter", return_value=[by_name, by_cmdline, one_shot_perl, other]
        ):
            found = cleanup.find_orphaned_exiftool_processes()

        assert found == [by_name, by_cmdline]

    def test_skips_vanished_processes(self) -> None:
        """Test that processes disappearing during the scan are skipped."""
        vanished = MagicMock()
        type(vanished).info = PropertyMock(side_effect=psutil.NoSuchProcess(1))
        match = fake_proc("ExifTool.exe", None)

        with patch.object(cleanup.psutil, "process_iter", return_value=[vanished, match]):
            found = cleanup.find_orphaned_exiftool_processes()

        assert found == [match]


class TestCleanupOrphanedProcesses:
    """Tests for cleanup_orphaned_exiftool_processes."""

    def test_nothing_found(self) -> None:
        with patch.object(cleanup.psutil, "process_iter", return_value=[]):
            assert cleanup.cleanup_orphaned_exiftool_processes() == (0, 0)

    def test_terminates_then_kills_survivors(self) -> None:
        """Test that stubborn processes are killed after the graceful wait."""
        polite = fake_proc("exiftool", None, running=[False] * 10)
        stubborn = fake_proc("exiftool", None, running=[True] * 1000)

        with patch.object(cleanup.psutil, "process_iter", return_value=[polite, stubborn]):
            found, killed = cleanup.cleanup_orphaned_exiftool_processes(graceful_wait_s=0.05)

        assert (found, killed) == (2, 1)
        polite.terminate.assert_called_once()
        stubborn.terminate.assert_called_once()
        polite.kill.assert_not_called()
        stubborn.kill.assert_called_once()
