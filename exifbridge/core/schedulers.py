"""Module: schedulers.py

Author: Michael Economou
Date: 2026-03-06

Idle-eviction schedulers used by stay-open strategies.

A scheduler holds at most one pending task. Arming a new task always
cancels the pending one first, so each execute() call pushes the idle
deadline back.

Every armed timer carries a generation number. A timer that was already
firing when it got cancelled sees a newer generation and does nothing,
so it cannot evict a process that a just-arrived call is reusing.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from exifbridge.config import CLEANUP_THREAD_NAME
from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_cached_logger(__name__)


class TimerScheduler:
    """Run a task once after a fixed delay, on a daemon timer thread."""

    def __init__(self, delay_ms: int, name: str | None = None) -> None:
        """Create a scheduler.

        Args:
            delay_ms: Delay in milliseconds before a pending task runs.
            name: Timer thread name (defaults to CLEANUP_THREAD_NAME).

        Raises:
            ValueError: If delay_ms is not strictly positive.

        """
        if delay_ms is None or delay_ms <= 0:
            raise ValueError("Delay must be strictly positive")

        self._delay_ms = delay_ms
        self._name = name or CLEANUP_THREAD_NAME
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending_task: Callable[[], None] | None = None
        self._generation = 0
        self._is_shutdown = False

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def name(self) -> str:
        return self._name

    def has_pending_task(self) -> bool:
        with self._lock:
            return self._pending_task is not None

    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def start(self, task: Callable[[], None]) -> None:
        """Arm task to run after the delay, replacing any pending task.

        Raises:
            RuntimeError: If the scheduler has been shut down.

        """
        with self._lock:
            if self._is_shutdown:
                raise RuntimeError("Scheduler has been shut down")

            self._cancel_pending()
            generation = self._generation
            timer = threading.Timer(self._delay_ms / 1000.0, self._fire, args=(generation, task))
            timer.name = self._name
            timer.daemon = True
            self._timer = timer
            self._pending_task = task
            timer.start()

        logger.debug(
            "[TimerScheduler] Task armed (generation %d, %d ms)",
            generation,
            self._delay_ms,
            extra={"dev_only": True},
        )

    def stop(self) -> None:
        with self._lock:
            self._cancel_pending()

    def shutdown(self) -> None:
        """Cancel the pending task; the scheduler cannot be armed again."""
        with self._lock:
            self._cancel_pending()
            self._is_shutdown = True
        logger.debug("[TimerScheduler] Shut down: %s", self._name, extra={"dev_only": True})

    def _cancel_pending(self) -> None:
        # Caller holds self._lock
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending_task = None
        self._generation += 1

    def _fire(self, generation: int, task: Callable[[], None]) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "[TimerScheduler] Stale timer ignored (generation %d, current %d)",
                    generation,
                    self._generation,
                    extra={"dev_only": True},
                )
                return
            self._timer = None
            self._pending_task = None

        try:
            task()
        except Exception:
            logger.exception("[TimerScheduler] Scheduled task failed")

    def __repr__(self) -> str:
        return f"<TimerScheduler name={self._name!r} delay_ms={self._delay_ms}>"


class NoOpScheduler:
    """Scheduler that never runs anything (no idle eviction)."""

    def start(self, task: Callable[[], None]) -> None:
        pass

    def stop(self) -> None:
        pass

    def shutdown(self) -> None:
        pass
