"""Module: handlers.py

Author: Michael Economou
Date: 2026-03-07

Output handlers framing exiftool responses.

Every "-execute" makes exiftool print EXIFTOOL_READY_MARKER once the
command output is complete; the handlers below stop there (or at the
end of the stream). Tag lines are printed as "Name: value" with "-S".
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from exifbridge.config import EXIFTOOL_READY_MARKER
from exifbridge.core.tags import tag_name
from exifbridge.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

TAG_SEPARATOR = ": "


def is_last_line(line: str | None) -> bool:
    return line is None or line == EXIFTOOL_READY_MARKER


class StopHandler:
    """Ignore output, stop at the ready marker."""

    def read_line(self, line: str | None) -> bool:
        return not is_last_line(line)


class _BaseTagHandler:
    def __init__(self) -> None:
        self._tags: dict[Any, str] = {}

    @property
    def tags(self) -> dict[Any, str]:
        return dict(self._tags)

    def size(self) -> int:
        return len(self._tags)

    def read_line(self, line: str | None) -> bool:
        if is_last_line(line):
            return False

        name, sep, value = line.partition(TAG_SEPARATOR)
        if not sep:
            logger.debug("[TagHandler] Skipping line: %s", line, extra={"dev_only": True})
            return True

        key = self._to_key(name.strip())
        if key is not None:
            self._tags[key] = value
        return True

    def _to_key(self, name: str) -> Any:
        raise NotImplementedError


class TagHandler(_BaseTagHandler):
    """Collect the values of the requested tags, keyed by the given tag objects.

    Lines for tags that were not requested are skipped.
    """

    def __init__(self, tags: Iterable[Any]) -> None:
        super().__init__()
        self._inputs = {tag_name(tag): tag for tag in tags}

    def _to_key(self, name: str) -> Any:
        return self._inputs.get(name)


class AllTagHandler(_BaseTagHandler):
    """Collect every tag line, keyed by tag name."""

    def _to_key(self, name: str) -> str:
        return name
