"""Module: cache.py

Author: Michael Economou
Date: 2026-03-06

Process-wide cache of exiftool versions, keyed by executable path.

A path is queried once ("<path> -ver") and assumed stable for the rest
of the process lifetime. Concurrent first loads of the same path share
one query: the per-path lock makes the second caller wait for the first
caller's result instead of spawning its own process.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from exifbridge.core.version import Version
from exifbridge.exceptions import ExifToolNotFoundError
from exifbridge.infra.process.command import CommandBuilder
from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from exifbridge.interfaces import CommandExecutor

logger = get_cached_logger(__name__)

VERSION_FLAG = "-ver"


class VersionCache:
    """Lazily populated path -> Version mapping with single-flight loading."""

    def __init__(self) -> None:
        self._versions: dict[str, Version] = {}
        self._path_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def load(self, path: str, executor: CommandExecutor) -> Version:
        """Return the version of the exiftool at path, querying it on first use.

        Args:
            path: exiftool executable path.
            executor: Executor used to run the version query.

        Returns:
            The cached or freshly parsed Version.

        Raises:
            ExifToolNotFoundError: If the query cannot run, exits with a
                failure status, or prints something that is not a version.

        """
        version = self._versions.get(path)
        if version is not None:
            return version

        with self._guard:
            path_lock = self._path_locks.setdefault(path, threading.Lock())

        with path_lock:
            version = self._versions.get(path)
            if version is None:
                version = self._query(path, executor)
                self._versions[path] = version
        return version

    def _query(self, path: str, executor: CommandExecutor) -> Version:
        command = CommandBuilder.builder(path, 1).add_argument(VERSION_FLAG).build()
        logger.debug("[VersionCache] Querying version: %s", command, extra={"dev_only": True})

        try:
            result = executor.execute(command)
        except OSError as e:
            logger.warning("[VersionCache] Version query failed for %s: %s", path, e)
            raise ExifToolNotFoundError(path) from e

        if not result.success:
            logger.warning("[VersionCache] Version query for %s returned %s", path, result)
            raise ExifToolNotFoundError(path)

        text = next((line for line in result.output.splitlines() if line.strip()), "")
        try:
            version = Version.parse(text)
        except ValueError as e:
            raise ExifToolNotFoundError(path) from e

        logger.info("[VersionCache] exiftool %s found at %s", version, path)
        return version

    def clear(self) -> None:
        """Forget every cached version (test isolation)."""
        with self._guard:
            self._versions.clear()
            self._path_locks.clear()

    def size(self) -> int:
        return len(self._versions)


_default_cache = VersionCache()


def get_version_cache() -> VersionCache:
    """Return the process-wide version cache."""
    return _default_cache


def load_version(path: str, executor: CommandExecutor) -> Version:
    """Load a version through the process-wide cache."""
    return _default_cache.load(path, executor)
