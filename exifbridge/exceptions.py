"""Module: exceptions.py

Author: Michael Economou
Date: 2026-03-04

Exception hierarchy for exifbridge.

Construction-time errors (ExifToolNotFoundError, UnsupportedFeatureError)
are fatal: fix the configuration and build a new ExifTool instance.
Execution errors surface per call as OSError subclasses; a strategy stays
usable after them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exifbridge.core.version import Version


class ExifToolError(Exception):
    """Base class for all exifbridge errors."""


class ExifToolNotFoundError(ExifToolError):
    """The exiftool executable could not be run or did not report a version."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot find exiftool from path: {path}")
        self.path = path


class UnsupportedFeatureError(ExifToolError):
    """The installed exiftool is too old for the requested strategy."""

    def __init__(self, path: str, version: Version, required: Version | None = None) -> None:
        required_text = str(required) if required is not None else str(version)
        super().__init__(
            f"Use of feature requires version {required_text} or higher of the native "
            f"ExifTool program. The version of ExifTool referenced by the path '{path}' "
            f"({version}) is not high enough. You can either upgrade the install of "
            "ExifTool or avoid using this feature to workaround this exception."
        )
        self.path = path
        self.version = version
        self.required = required


class ProcessClosedError(ExifToolError, RuntimeError):
    """Read or write attempted on a closed process handle."""


class PoolIOError(ExifToolError, OSError):
    """One or more pool members failed to close.

    Every member is attempted before this is raised; ``errors`` holds each
    individual failure in member order.
    """

    def __init__(self, message: str, errors: Iterable[BaseException]) -> None:
        super().__init__(message)
        self.errors = tuple(errors)


class PoolTimeoutError(ExifToolError, TimeoutError):
    """No pooled session became available within the checkout timeout."""


class PoolClosedError(ExifToolError, RuntimeError):
    """The pool has been shut down and cannot serve new calls."""


class UnreadableFileError(ExifToolError, OSError):
    """The image to query does not exist or cannot be read."""


class UnwritableFileError(ExifToolError, OSError):
    """The image to update does not exist or cannot be written."""
