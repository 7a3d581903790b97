"""Module: io.py

Author: Michael Economou
Date: 2026-03-05

Line protocol reader for exiftool output.

Bytes are read one line at a time directly from the binary stream, so
nothing past the current line is consumed: with a stay-open process, the
next response is still in the pipe when the handler stops.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any

from exifbridge.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from exifbridge.interfaces import OutputHandler

logger = get_cached_logger(__name__)

ENCODING = "utf-8"


def decode_line(raw: bytes) -> str:
    """Decode one raw line and strip its terminator ("\\n" or "\\r\\n")."""
    return raw.decode(ENCODING, errors="replace").rstrip("\r\n")


def read_input_stream(stream: IO[bytes], handler: OutputHandler) -> bool:
    """Feed the lines of a byte stream to a handler.

    Reading stops as soon as the handler returns False; the stream is then
    left open since the process behind it may still be alive. When the end
    of the stream is reached first, the stream is closed here.

    Args:
        stream: Readable binary stream (typically a process stdout).
        handler: Line handler deciding when the response is complete.

    Returns:
        True if the end of the stream was reached, False if the handler stopped.

    Raises:
        OSError: If reading from the stream fails.

    """
    while True:
        raw = stream.readline()
        if not raw:
            logger.debug("[LineReader] End of stream reached", extra={"dev_only": True})
            stream.close()
            return True

        if not handler.read_line(decode_line(raw)):
            return False


def close_quietly(closeable: Any) -> None:
    """Close a resource, logging (not raising) any failure."""
    if closeable is None:
        return
    try:
        closeable.close()
    except Exception as e:
        logger.warning("[LineReader] Failed to close %r: %s", closeable, e)

