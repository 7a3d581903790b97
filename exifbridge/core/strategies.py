"""Module: strategies.py

Author: Michael Economou
Date: 2026-03-07

Execution strategies: how one logical exiftool call maps onto OS processes.

- DefaultStrategy: one short-lived process per call.
- StayOpenStrategy: one persistent "-stay_open" process reused across
  calls, released by an idle-eviction scheduler.
- PoolStrategy: a fixed set of stay-open sessions behind a blocking
  checkout queue, bounding the number of concurrent exiftool processes.

Thread safety:
    DefaultStrategy and PoolStrategy can be shared between threads.
    StayOpenStrategy must not be used by two threads at once: both would
    write to the same stdin. Only its process handle is guarded, against
    the eviction timer thread.
"""

from __future__ import annotations

import functools
import queue
import threading
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from exifbridge.config import STAY_OPEN_MIN_VERSION
from exifbridge.core.version import Version
from exifbridge.exceptions import (
    PoolClosedError,
    PoolIOError,
    PoolTimeoutError,
    ProcessClosedError,
)
from exifbridge.infra.process.command import CommandBuilder
from exifbridge.infra.process.io import close_quietly
from exifbridge.infra.process.process import BR
from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from exifbridge.infra.process.process import CommandProcess
    from exifbridge.interfaces import (
        CommandExecutor,
        ExecutionStrategy,
        OutputHandler,
        Scheduler,
    )

logger = get_cached_logger(__name__)

STAY_OPEN_ARGUMENTS = ("-stay_open", "True", "-@", "-")
CLOSE_SEQUENCE = "-stay_open" + BR + "False" + BR


class DefaultStrategy:
    """Spawn a new exiftool process for every call."""

    def execute(
        self,
        executor: CommandExecutor,
        exiftool: str,
        arguments: Sequence[str],
        handler: OutputHandler,
    ) -> None:
        command = CommandBuilder.builder(exiftool, len(arguments)).add_all(arguments).build()
        executor.execute(command, handler)

    def is_running(self) -> bool:
        return False

    def is_supported(self, version: Version) -> bool:
        return True

    def close(self) -> None:
        pass

    def shutdown(self) -> None:
        pass


class StayOpenStrategy:
    """Reuse one persistent exiftool process across calls.

    The process is started on first use, or whenever the held handle
    reports closed. Each call re-arms the scheduler, so the process is
    released after one idle delay without calls and transparently
    respawned on the next one.

    Every call takes a new activity token and arms the eviction with it.
    An eviction whose token is no longer current leaves the process alone:
    a call arrived after it was armed.
    """

    required_version = Version.parse(STAY_OPEN_MIN_VERSION)

    def __init__(self, scheduler: Scheduler) -> None:
        if scheduler is None:
            raise TypeError("Scheduler should not be null")
        self._scheduler = scheduler
        self._process: CommandProcess | None = None
        self._activity = 0
        self._lock = threading.Lock()

    def execute(
        self,
        executor: CommandExecutor,
        exiftool: str,
        arguments: Sequence[str],
        handler: OutputHandler,
    ) -> None:
        """Send arguments to the persistent process and read one response.

        Raises:
            OSError: If the process cannot be started, written or read. The
                broken handle is dropped so the next call starts a new one.

        """
        self._scheduler.stop()
        process, token = self._ensure_process(executor, exiftool)
        self._scheduler.start(functools.partial(self._evict, token))

        try:
            for argument in arguments:
                process.write(argument + BR)
            process.flush()
            process.read(handler)
        except (OSError, ValueError, ProcessClosedError) as e:
            # ValueError: I/O on a pipe that was closed underneath us
            logger.warning("[StayOpenStrategy] I/O failure, dropping process: %s", e)
            self._discard(process)
            raise

        if process.is_closed() or not process.is_running():
            logger.debug(
                "[StayOpenStrategy] Process output ended during call, dropping handle",
                extra={"dev_only": True},
            )
            self._discard(process)

    def _ensure_process(
        self, executor: CommandExecutor, exiftool: str
    ) -> tuple[CommandProcess, int]:
        with self._lock:
            self._activity += 1
            if self._process is None or self._process.is_closed():
                command = (
                    CommandBuilder.builder(exiftool, len(STAY_OPEN_ARGUMENTS))
                    .add_all(STAY_OPEN_ARGUMENTS)
                    .build()
                )
                logger.debug(
                    "[StayOpenStrategy] Starting process: %s", command, extra={"dev_only": True}
                )
                self._process = executor.start(command)
            return self._process, self._activity

    def _discard(self, process: CommandProcess) -> None:
        with self._lock:
            if self._process is process:
                self._process = None
        close_quietly(process)

    def _evict(self, token: int) -> None:
        with self._lock:
            if token != self._activity:
                logger.debug(
                    "[StayOpenStrategy] Stale eviction ignored (token %d, current %d)",
                    token,
                    self._activity,
                    extra={"dev_only": True},
                )
                return
            process, self._process = self._process, None

        logger.debug(
            "[StayOpenStrategy] Idle delay elapsed, closing process", extra={"dev_only": True}
        )
        self._close_process(process)

    def is_running(self) -> bool:
        with self._lock:
            return self._process is not None and self._process.is_running()

    def is_supported(self, version: Version) -> bool:
        return version >= self.required_version

    def _close_process(self, process: CommandProcess | None) -> None:
        if process is None or process.is_closed():
            return
        try:
            process.write(CLOSE_SEQUENCE)
            process.flush()
        except (OSError, ValueError) as e:
            logger.debug(
                "[StayOpenStrategy] Graceful exit request failed: %s",
                e,
                extra={"dev_only": True},
            )
        process.close()
        logger.debug("[StayOpenStrategy] Process closed", extra={"dev_only": True})

    def close(self) -> None:
        """Ask the process to exit, close its handle, then stop the scheduler.

        Safe to call when no process is running (only the scheduler is stopped).

        Raises:
            OSError: If closing the process handle fails.

        """
        with self._lock:
            process, self._process = self._process, None

        try:
            self._close_process(process)
        finally:
            self._scheduler.stop()

    def shutdown(self) -> None:
        """Close the process and release the scheduler for good."""
        try:
            self.close()
        finally:
            self._scheduler.shutdown()


_CLOSE = "close"
_SHUTDOWN = "shutdown"


class PoolStrategy:
    """Fixed-size pool of stay-open sessions.

    A session is checked out for exactly one call and returned afterwards,
    whether the call succeeded or not. With all sessions busy, execute()
    blocks (up to ``timeout`` seconds when one is given).

    close() and shutdown() release idle sessions at once. A session that
    is checked out at that moment is released by the borrowing thread as
    soon as its call returns. After shutdown(), execute() raises
    PoolClosedError.
    """

    def __init__(
        self,
        strategies: Iterable[ExecutionStrategy],
        timeout: float | None = None,
    ) -> None:
        """Create a pool from already built sessions.

        Args:
            strategies: Pool members, constructed identically.
            timeout: Max seconds to wait for a free session (None waits forever).

        Raises:
            ValueError: If no strategy is given or timeout is not positive.

        """
        members = tuple(strategies)
        if not members:
            raise ValueError("Pool should contain at least one strategy")
        if timeout is not None and timeout <= 0:
            raise ValueError("Pool timeout must be strictly positive")

        self._members = members
        self._timeout = timeout
        self._pool: queue.Queue = queue.Queue()
        for member in members:
            self._pool.put(member)

        self._state_lock = threading.Lock()
        self._checked_out: set = set()
        self._pending_release: dict = {}
        self._release_epoch = 0
        self._is_shutdown = False

    def execute(
        self,
        executor: CommandExecutor,
        exiftool: str,
        arguments: Sequence[str],
        handler: OutputHandler,
    ) -> None:
        """Run the call on a free session.

        Raises:
            PoolClosedError: If the pool has been shut down.
            PoolTimeoutError: If no session became free within the timeout.
            OSError: If the session fails.

        """
        member = self._checkout()
        try:
            member.execute(executor, exiftool, arguments, handler)
        finally:
            self._checkin(member)

    def _checkout(self) -> ExecutionStrategy:
        if self._is_shutdown:
            raise PoolClosedError("Pool has been shut down")

        epoch = self._release_epoch
        try:
            member = self._pool.get(timeout=self._timeout)
        except queue.Empty:
            raise PoolTimeoutError(
                f"No pooled session available after {self._timeout} seconds"
            ) from None

        with self._state_lock:
            if self._is_shutdown:
                self._pool.put(member)
                raise PoolClosedError("Pool has been shut down")
            self._checked_out.add(member)
            released_meanwhile = epoch != self._release_epoch

        if released_meanwhile:
            # Taken while close() was draining: it may have missed this member
            try:
                member.close()
            except OSError:
                self._checkin(member)
                raise
        return member

    def _checkin(self, member: ExecutionStrategy) -> None:
        with self._state_lock:
            self._checked_out.discard(member)
            action = self._pending_release.pop(member, None)

        try:
            if action is not None:
                logger.debug(
                    "[PoolStrategy] Releasing returned session (%s)",
                    action,
                    extra={"dev_only": True},
                )
                getattr(member, action)()
        except OSError as e:
            logger.warning("[PoolStrategy] Failed to %s returned session: %s", action, e)
        finally:
            self._pool.put(member)

    def _release(self, action: str) -> None:
        with self._state_lock:
            if action == _SHUTDOWN:
                if self._is_shutdown:
                    return
                self._is_shutdown = True
            self._release_epoch += 1

            for member in self._checked_out:
                if action == _SHUTDOWN or member not in self._pending_release:
                    self._pending_release[member] = action

            idle = []
            while True:
                try:
                    idle.append(self._pool.get_nowait())
                except queue.Empty:
                    break

        errors: list[BaseException] = []
        try:
            for member in idle:
                try:
                    getattr(member, action)()
                except OSError as e:
                    logger.warning("[PoolStrategy] Failed to %s session: %s", action, e)
                    errors.append(e)
        finally:
            for member in idle:
                self._pool.put(member)

        logger.debug(
            "[PoolStrategy] %s: %d idle session(s) released, %d deferred",
            action,
            len(idle),
            len(self._members) - len(idle),
            extra={"dev_only": True},
        )

        if errors:
            raise PoolIOError(f"Failed to {action} {len(errors)} pooled session(s)", errors)

    def close(self) -> None:
        """Close every session; the pool stays usable.

        Raises:
            PoolIOError: If one or more idle sessions failed to close.

        """
        self._release(_CLOSE)

    def shutdown(self) -> None:
        """Shut every session down; the pool cannot be used afterwards.

        Raises:
            PoolIOError: If one or more idle sessions failed to shut down.

        """
        self._release(_SHUTDOWN)

    def is_running(self) -> bool:
        return any(member.is_running() for member in self._members)

    def is_supported(self, version: Version) -> bool:
        return self._members[0].is_supported(version)

    @property
    def required_version(self) -> Version | None:
        return getattr(self._members[0], "required_version", None)

    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def size(self) -> int:
        return len(self._members)

    def available(self) -> int:
        return self._pool.qsize()
