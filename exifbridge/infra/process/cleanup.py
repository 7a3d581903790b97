"""Module: cleanup.py

Author: Michael Economou
Date: 2026-03-06

System-wide scan for exiftool processes left behind by crashed or
unclosed sessions.

Both functions are bounded in time so they can run during shutdown
without stalling the caller.
"""

from __future__ import annotations

import contextlib
import time

import psutil

from exifbridge.config import ORPHAN_GRACEFUL_WAIT_SECONDS, ORPHAN_SCAN_MAX_SECONDS
from exifbridge.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def _is_exiftool_process(info: dict) -> bool:
    name = info.get("name")
    if name and "exiftool" in name.lower():
        return True
    cmdline = info.get("cmdline")
    if cmdline:
        joined = " ".join(cmdline).lower()
        return "exiftool" in joined and "-stay_open" in joined
    return False


def find_orphaned_exiftool_processes(
    max_scan_s: float = ORPHAN_SCAN_MAX_SECONDS,
) -> list[psutil.Process]:
    """Return the exiftool processes currently visible on the system.

    A process matches when its name contains "exiftool", or when its
    command line mentions both "exiftool" and "-stay_open" (a perl
    interpreter running a stay-open session).

    Args:
        max_scan_s: Maximum time to spend iterating the process table.

    Returns:
        Matching processes, possibly partial if the time cap was hit.

    """
    found: list[psutil.Process] = []
    scan_start = time.perf_counter()
    for proc in psutil.process_iter(["pid", "name", "cmdline"]):
        if (time.perf_counter() - scan_start) > max_scan_s:
            logger.debug(
                "[ProcessCleanup] Process scan time limit reached (%.2fs)",
                max_scan_s,
                extra={"dev_only": True},
            )
            break
        try:
            if _is_exiftool_process(proc.info):
                found.append(proc)
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return found


def _alive(processes: list[psutil.Process]) -> list[psutil.Process]:
    alive = []
    for proc in processes:
        try:
            if proc.is_running():
                alive.append(proc)
        except psutil.NoSuchProcess:
            continue
    return alive


def cleanup_orphaned_exiftool_processes(
    max_scan_s: float = ORPHAN_SCAN_MAX_SECONDS,
    graceful_wait_s: float = ORPHAN_GRACEFUL_WAIT_SECONDS,
) -> tuple[int, int]:
    """Terminate every orphaned exiftool process, killing the stubborn ones.

    Args:
        max_scan_s: Maximum time to spend scanning processes.
        graceful_wait_s: Maximum time to wait for terminate() before kill().

    Returns:
        (found, killed): processes matched, and processes that had to be
        killed after the graceful wait.

    """
    processes = find_orphaned_exiftool_processes(max_scan_s)
    if not processes:
        logger.debug(
            "[ProcessCleanup] No orphaned ExifTool processes found",
            extra={"dev_only": True},
        )
        return 0, 0

    logger.warning("[ProcessCleanup] Found %d orphaned ExifTool processes", len(processes))

    for proc in processes:
        with contextlib.suppress(psutil.NoSuchProcess, psutil.AccessDenied):
            proc.terminate()

    deadline = time.perf_counter() + max(0.0, graceful_wait_s)
    remaining = _alive(processes)
    while remaining and time.perf_counter() < deadline:
        time.sleep(0.01)
        remaining = _alive(remaining)

    if remaining:
        logger.warning("[ProcessCleanup] Force killing %d ExifTool processes", len(remaining))
        for proc in remaining:
            with contextlib.suppress(psutil.NoSuchProcess, psutil.AccessDenied):
                proc.kill()

    return len(processes), len(remaining)
