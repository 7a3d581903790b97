"""Module: exiftool.py

Author: Michael Economou
Date: 2026-03-08

ExifTool facade: read and write image metadata through an execution
strategy, plus the builder that picks the strategy.

Usage:
    with ExifToolBuilder().enable_stay_open().build() as exiftool:
        meta = exiftool.get_image_meta("photo.jpg", [StandardTag.ISO, StandardTag.MAKE])

Instances should be closed explicitly (close() or a with block). An
instance that is garbage collected while still open logs a warning and
shuts its strategy down, but this is only a leak detector.
"""

from __future__ import annotations

import os
import time
import weakref
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from exifbridge.config import get_cleanup_delay, get_exiftool_path
from exifbridge.core.cache import get_version_cache
from exifbridge.core.handlers import AllTagHandler, StopHandler, TagHandler
from exifbridge.core.options import ExifToolOptions
from exifbridge.core.schedulers import NoOpScheduler, TimerScheduler
from exifbridge.core.strategies import DefaultStrategy, PoolStrategy, StayOpenStrategy
from exifbridge.core.tags import Format, tag_name
from exifbridge.exceptions import (
    UnreadableFileError,
    UnsupportedFeatureError,
    UnwritableFileError,
)
from exifbridge.infra.process.executor import DefaultCommandExecutor
from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from exifbridge.core.cache import VersionCache
    from exifbridge.core.version import Version
    from exifbridge.interfaces import CommandExecutor, ExecutionStrategy, Scheduler

logger = get_cached_logger(__name__)

_IMAGE_MESSAGE = "Image cannot be null and must be a valid stream of image data."
_FORMAT_MESSAGE = "Format cannot be null."
_TAGS_MESSAGE = "Tags cannot be null and must contain 1 or more Tag to query the image for."
_UNREADABLE_MESSAGE = (
    "Unable to read the given image [{}], ensure that the image exists at the given "
    "path and that the current process has permissions to read it."
)
_UNWRITABLE_MESSAGE = (
    "Unable to write the given image [{}], ensure that the image exists at the given "
    "path and that the current process has permissions to write it."
)


def _to_options(fmt: Format | ExifToolOptions | None) -> ExifToolOptions:
    if fmt is None:
        raise TypeError(_FORMAT_MESSAGE)
    if isinstance(fmt, ExifToolOptions):
        return fmt
    return ExifToolOptions.from_format(fmt)


def _check_image(image: str | os.PathLike | None) -> Path:
    if image is None:
        raise TypeError(_IMAGE_MESSAGE)
    return Path(image).absolute()


def _leak_detected(strategy: ExecutionStrategy, path: str) -> None:
    logger.warning("[ExifTool] Instance for %s was not closed, shutting it down", path)
    try:
        strategy.shutdown()
    except OSError as e:
        logger.warning("[ExifTool] Shutdown of leaked instance failed: %s", e)


class ExifTool:
    """Read/write metadata with the exiftool program.

    Attributes:
        path: exiftool executable path.
        version: Version reported by the executable.

    Raises (constructor):
        TypeError: If path, executor or strategy is None.
        ExifToolNotFoundError: If the executable cannot be run.
        UnsupportedFeatureError: If the strategy needs a newer exiftool.
    """

    def __init__(
        self,
        path: str,
        executor: CommandExecutor,
        strategy: ExecutionStrategy,
        *,
        version_cache: VersionCache | None = None,
    ) -> None:
        if path is None:
            raise TypeError("ExifTool path should not be null")
        if executor is None:
            raise TypeError("Executor should not be null")
        if strategy is None:
            raise TypeError("Execution strategy should not be null")

        self._path = path
        self._executor = executor
        self._strategy = strategy
        self._closed = False

        cache = version_cache if version_cache is not None else get_version_cache()
        self._version = cache.load(path, executor)

        if not strategy.is_supported(self._version):
            logger.error(
                "[ExifTool] %s does not support exiftool %s",
                type(strategy).__name__,
                self._version,
            )
            raise UnsupportedFeatureError(
                path, self._version, getattr(strategy, "required_version", None)
            )

        self._finalizer = weakref.finalize(self, _leak_detected, strategy, path)
        logger.debug(
            "[ExifTool] Ready: %s (%s) with %s",
            path,
            self._version,
            type(strategy).__name__,
            extra={"dev_only": True},
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def version(self) -> Version:
        return self._version

    @property
    def strategy(self) -> ExecutionStrategy:
        return self._strategy

    def is_running(self) -> bool:
        return self._strategy.is_running()

    def get_image_meta(
        self,
        image: str | os.PathLike,
        tags: Iterable[Any],
        format: Format | ExifToolOptions = Format.NUMERIC,
    ) -> dict[Any, str]:
        """Read the given tags from an image.

        Args:
            image: Image path.
            tags: Tags to query (Tag, StandardTag or tag names).
            format: Output format, or full options.

        Returns:
            Mapping of each found tag (as given) to its raw value. Tags the
            image does not have are absent.

        Raises:
            TypeError: If image, tags or format is None.
            ValueError: If tags is empty.
            UnreadableFileError: If the image is missing or unreadable.
            OSError: If the exiftool process fails.

        """
        file_path = _check_image(image)
        options = _to_options(format)
        if tags is None:
            raise TypeError(_TAGS_MESSAGE)
        tag_list = list(tags)
        if not tag_list:
            raise ValueError(_TAGS_MESSAGE)
        self._check_readable(file_path)

        args = [
            *options.serialize(),
            "-S",
            *(f"-{tag_name(tag)}" for tag in tag_list),
            str(file_path),
            "-execute",
        ]

        handler = TagHandler(tag_list)
        start = time.perf_counter()
        self._strategy.execute(self._executor, self._path, args, handler)
        logger.debug(
            "[ExifTool] Queried %d tags from %s, found %d in %.3fs",
            len(tag_list),
            file_path.name,
            handler.size(),
            time.perf_counter() - start,
            extra={"dev_only": True},
        )
        return handler.tags

    def get_all_image_meta(
        self,
        image: str | os.PathLike,
        format: Format | ExifToolOptions = Format.NUMERIC,
    ) -> dict[str, str]:
        """Read every tag exiftool reports for an image, keyed by tag name.

        Raises:
            TypeError: If image or format is None.
            UnreadableFileError: If the image is missing or unreadable.
            OSError: If the exiftool process fails.

        """
        file_path = _check_image(image)
        options = _to_options(format)
        self._check_readable(file_path)

        args = [*options.serialize(), "-S", str(file_path), "-execute"]
        handler = AllTagHandler()
        self._strategy.execute(self._executor, self._path, args, handler)
        logger.debug(
            "[ExifTool] Read %d tags from %s",
            handler.size(),
            file_path.name,
            extra={"dev_only": True},
        )
        return handler.tags

    def set_image_meta(
        self,
        image: str | os.PathLike,
        tags: Mapping[Any, Any],
        format: Format | ExifToolOptions = Format.NUMERIC,
    ) -> None:
        """Write tag values to an image.

        Args:
            image: Image path.
            tags: Mapping of tag (Tag, StandardTag or name) to value.
            format: Value format, or full options (e.g. overwrite mode).

        Raises:
            TypeError: If image, tags or format is None.
            ValueError: If tags is empty.
            UnwritableFileError: If the image is missing or not writable.
            OSError: If the exiftool process fails.

        """
        file_path = _check_image(image)
        options = _to_options(format)
        if tags is None:
            raise TypeError(_TAGS_MESSAGE)
        if not tags:
            raise ValueError(_TAGS_MESSAGE)
        if not (file_path.is_file() and os.access(file_path, os.W_OK)):
            raise UnwritableFileError(_UNWRITABLE_MESSAGE.format(file_path))

        args = [
            *options.serialize(),
            "-S",
            *(f"-{tag_name(tag)}={value}" for tag, value in tags.items()),
            str(file_path),
            "-execute",
        ]

        start = time.perf_counter()
        self._strategy.execute(self._executor, self._path, args, StopHandler())
        logger.info(
            "[ExifTool] Wrote %d tags to %s in %.3fs",
            len(tags),
            file_path.name,
            time.perf_counter() - start,
        )

    def _check_readable(self, file_path: Path) -> None:
        if not (file_path.is_file() and os.access(file_path, os.R_OK)):
            raise UnreadableFileError(_UNREADABLE_MESSAGE.format(file_path))

    def stop(self) -> None:
        """Release the running exiftool process(es); the instance stays usable."""
        self._strategy.close()

    def close(self) -> None:
        """Shut the strategy down for good. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._finalizer.detach()
        self._strategy.shutdown()
        logger.debug("[ExifTool] Closed: %s", self._path, extra={"dev_only": True})

    def __enter__(self) -> ExifTool:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        strategy = type(self._strategy).__name__
        return f"<ExifTool path={self._path!r} version={self._version} strategy={strategy}>"


class ExifToolBuilder:
    """Fluent builder choosing the execution strategy.

    Rules, in order:
        1. An explicit strategy (with_strategy) is used as is.
        2. A pool size > 0 builds a PoolStrategy of stay-open sessions,
           each with its own TimerScheduler when a delay is given, else
           without idle eviction.
        3. enable_stay_open() builds a StayOpenStrategy with the given
           scheduler, or a TimerScheduler using the configured delay.
        4. Otherwise a DefaultStrategy (one process per call).
    """

    def __init__(self) -> None:
        self._path: str | None = None
        self._executor: CommandExecutor | None = None
        self._strategy: ExecutionStrategy | None = None
        self._stay_open = False
        self._cleanup_delay_ms: int | None = None
        self._scheduler: Scheduler | None = None
        self._pool_size = 0
        self._pool_delay_ms: int | None = None
        self._pool_timeout: float | None = None

    def with_path(self, path: str) -> ExifToolBuilder:
        self._path = path
        return self

    def with_executor(self, executor: CommandExecutor) -> ExifToolBuilder:
        self._executor = executor
        return self

    def enable_stay_open(
        self,
        delay_ms: int | None = None,
        scheduler: Scheduler | None = None,
    ) -> ExifToolBuilder:
        """Use one persistent process, released after delay_ms of inactivity."""
        self._stay_open = True
        self._cleanup_delay_ms = delay_ms
        self._scheduler = scheduler
        return self

    def with_pool_size(self, size: int, delay_ms: int | None = None) -> ExifToolBuilder:
        """Use a pool of ``size`` persistent processes.

        Raises:
            ValueError: If size is negative.

        """
        if size < 0:
            raise ValueError("Pool size must be positive")
        self._pool_size = size
        self._pool_delay_ms = delay_ms
        return self

    def with_pool_timeout(self, seconds: float | None) -> ExifToolBuilder:
        self._pool_timeout = seconds
        return self

    def with_strategy(self, strategy: ExecutionStrategy) -> ExifToolBuilder:
        self._strategy = strategy
        return self

    def build(self) -> ExifTool:
        path = self._path or get_exiftool_path()
        executor = self._executor or DefaultCommandExecutor()
        strategy = self._strategy or self._create_strategy()
        return ExifTool(path, executor, strategy)

    def _create_strategy(self) -> ExecutionStrategy:
        if self._pool_size > 0:
            members = [
                StayOpenStrategy(
                    TimerScheduler(self._pool_delay_ms)
                    if self._pool_delay_ms is not None and self._pool_delay_ms > 0
                    else NoOpScheduler()
                )
                for _ in range(self._pool_size)
            ]
            logger.debug(
                "[ExifToolBuilder] Pool of %d sessions", self._pool_size, extra={"dev_only": True}
            )
            return PoolStrategy(members, self._pool_timeout)

        if self._stay_open:
            scheduler = self._scheduler
            if scheduler is None:
                delay_ms = self._cleanup_delay_ms
                if delay_ms is None:
                    delay_ms = get_cleanup_delay()
                scheduler = TimerScheduler(delay_ms) if delay_ms > 0 else NoOpScheduler()
            return StayOpenStrategy(scheduler)

        return DefaultStrategy()
