"""Module: process.py

Author: Michael Economou
Date: 2026-03-05

Handle on a running external process and its three pipes.

The handle is what a stay-open strategy keeps between calls: commands are
written to the process stdin and responses are framed out of its stdout
by the line reader.
"""

from __future__ import annotations

import subprocess
import threading
from collections.abc import Sequence
from typing import IO, TYPE_CHECKING, Any

import psutil

from exifbridge.exceptions import ProcessClosedError
from exifbridge.infra.process.io import ENCODING, close_quietly, read_input_stream
from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from exifbridge.interfaces import OutputHandler

logger = get_cached_logger(__name__)

BR = "\n"

# psutil.Popen raises its own TimeoutExpired from wait()
_WAIT_TIMEOUTS = (subprocess.TimeoutExpired, psutil.TimeoutExpired)


class _LineRecorder:
    """Record the lines seen by a handler, delegating the framing decision."""

    def __init__(self, delegate: OutputHandler | None = None) -> None:
        self._delegate = delegate
        self.lines: list[str] = []

    def read_line(self, line: str | None) -> bool:
        if line is not None:
            self.lines.append(line)
        if self._delegate is None:
            return True
        return self._delegate.read_line(line)


class CommandProcess:
    """Duplex pipe handle on one external process.

    Attributes:
        pid: OS process id when the process is tracked, else None.

    Once closed, every read/write raises ProcessClosedError. Closing is
    idempotent and always leaves the handle closed, even when closing one
    of the streams fails.
    """

    def __init__(
        self,
        input_stream: IO[bytes],
        output_stream: IO[bytes],
        error_stream: IO[bytes],
        process: Any = None,
        *,
        graceful_wait_s: float = 1.0,
        terminate_wait_s: float = 0.5,
        kill_wait_s: float = 0.5,
    ) -> None:
        """Wrap the pipes of a process.

        Args:
            input_stream: Readable end connected to the process stdout.
            output_stream: Writable end connected to the process stdin.
            error_stream: Readable end connected to the process stderr.
            process: Optional Popen-like object (poll/wait/terminate/kill)
                used for liveness checks and reaping on close.
            graceful_wait_s: Max seconds to wait for a voluntary exit on close.
            terminate_wait_s: Max seconds to wait after terminate().
            kill_wait_s: Max seconds to wait after kill().

        Raises:
            TypeError: If one of the streams is None.

        """
        if input_stream is None:
            raise TypeError("Input stream should not be null")
        if output_stream is None:
            raise TypeError("Output stream should not be null")
        if error_stream is None:
            raise TypeError("Error stream should not be null")

        self._input = input_stream
        self._output = output_stream
        self._error = error_stream
        self._process = process
        self._graceful_wait_s = graceful_wait_s
        self._terminate_wait_s = terminate_wait_s
        self._kill_wait_s = kill_wait_s

        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def pid(self) -> int | None:
        return getattr(self._process, "pid", None)

    def is_closed(self) -> bool:
        return self._closed

    def is_running(self) -> bool:
        """Return True if the handle is open and the tracked process is alive."""
        if self._closed:
            return False
        if self._process is None:
            return True
        if self._process.poll() is not None:
            return False
        if isinstance(self._process, psutil.Process):
            try:
                return (
                    self._process.is_running()
                    and self._process.status() != psutil.STATUS_ZOMBIE
                )
            except psutil.Error:
                return False
        return True

    def write(self, inputs: str | Sequence[str]) -> None:
        """Encode and send text to the process stdin, then flush.

        Args:
            inputs: A string, or a non-empty sequence of strings written in order.

        Raises:
            ProcessClosedError: If the handle is closed.
            TypeError: If inputs is None.
            ValueError: If inputs is empty.
            OSError: If the pipe is broken.

        """
        if self._closed:
            raise ProcessClosedError("Cannot write from closed process")
        if inputs is None:
            raise TypeError("Write input should not be null")

        if isinstance(inputs, str):
            if not inputs:
                raise ValueError("Write input should not be empty")
            chunks = [inputs]
        else:
            chunks = list(inputs)
            if not chunks:
                raise ValueError("Write inputs should not be empty")

        for chunk in chunks:
            self._output.write(chunk.encode(ENCODING))
        self._output.flush()

    def flush(self) -> None:
        if self._closed:
            raise ProcessClosedError("Cannot flush closed process")
        self._output.flush()

    def read(self, handler: OutputHandler | None = None) -> str:
        """Read lines from the process stdout.

        Without a handler, reads until the end of the stream. With a
        handler, stops right after the line for which it returns False.
        Reaching the end of the stream closes the handle.

        Returns:
            The lines consumed, joined with "\\n" (no trailing terminator).

        Raises:
            ProcessClosedError: If the handle is closed.
            OSError: If reading fails.

        """
        if self._closed:
            raise ProcessClosedError("Cannot read from closed process")

        recorder = _LineRecorder(handler)
        if read_input_stream(self._input, recorder):
            # stdout is gone, the handle cannot serve another response
            logger.debug(
                "[CommandProcess] End of output reached, closing %s",
                self.pid,
                extra={"dev_only": True},
            )
            close_quietly(self)
        return BR.join(recorder.lines)

    def close(self) -> None:
        """Close stdout, stdin and stderr (in that order), then reap the process.

        All three streams are attempted; the first failure is raised once
        the others have been closed, later failures are only logged.

        Raises:
            OSError: The first stream close failure, if any.

        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        first_error: Exception | None = None
        for name, stream in (
            ("stdout", self._input),
            ("stdin", self._output),
            ("stderr", self._error),
        ):
            try:
                stream.close()
            except Exception as e:
                if first_error is None:
                    first_error = e
                else:
                    logger.warning("[CommandProcess] Failed to close %s: %s", name, e)

        self._reap()

        if first_error is not None:
            logger.warning("[CommandProcess] Process closed with error: %s", first_error)
            raise first_error

        logger.debug("[CommandProcess] Process %s closed", self.pid, extra={"dev_only": True})

    def _reap(self) -> None:
        """Wait for the tracked process to exit, escalating to terminate/kill."""
        proc = self._process
        if proc is None:
            return

        try:
            proc.wait(timeout=self._graceful_wait_s)
            return
        except _WAIT_TIMEOUTS:
            logger.debug(
                "[CommandProcess] Graceful exit timed out (%.2fs), terminating %s",
                self._graceful_wait_s,
                self.pid,
                extra={"dev_only": True},
            )

        try:
            proc.terminate()
            proc.wait(timeout=self._terminate_wait_s)
            return
        except _WAIT_TIMEOUTS:
            logger.warning("[CommandProcess] Terminate timed out, killing %s", self.pid)
        except (OSError, psutil.Error) as e:
            logger.debug("[CommandProcess] Terminate failed: %s", e, extra={"dev_only": True})

        try:
            proc.kill()
            proc.wait(timeout=self._kill_wait_s)
        except _WAIT_TIMEOUTS:
            logger.error("[CommandProcess] Zombie process detected: %s", self.pid)
        except (OSError, psutil.Error) as e:
            logger.debug("[CommandProcess] Kill failed: %s", e, extra={"dev_only": True})

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<CommandProcess pid={self.pid} {state}>"
