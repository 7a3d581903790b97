"""exifbridge: managed access to the exiftool program.

Author: Michael Economou
Date: 2026-03-09

One long-lived exiftool process (or a pool of them) serves many metadata
reads and writes, instead of spawning a process per call.

Usage:
    from exifbridge import ExifToolBuilder, StandardTag

    with ExifToolBuilder().with_pool_size(4).build() as exiftool:
        meta = exiftool.get_image_meta("photo.jpg", [StandardTag.ISO])
"""

from exifbridge.config.app import APP_VERSION as __version__
from exifbridge.core.options import ExifToolOptions, OverwriteMode
from exifbridge.core.tags import Format, StandardTag, Tag, TagType
from exifbridge.core.version import Version
from exifbridge.exceptions import (
    ExifToolError,
    ExifToolNotFoundError,
    PoolClosedError,
    PoolIOError,
    PoolTimeoutError,
    ProcessClosedError,
    UnreadableFileError,
    UnsupportedFeatureError,
    UnwritableFileError,
)
from exifbridge.exiftool import ExifTool, ExifToolBuilder

__all__ = [
    "ExifTool",
    "ExifToolBuilder",
    "ExifToolError",
    "ExifToolNotFoundError",
    "ExifToolOptions",
    "Format",
    "OverwriteMode",
    "PoolClosedError",
    "PoolIOError",
    "PoolTimeoutError",
    "ProcessClosedError",
    "StandardTag",
    "Tag",
    "TagType",
    "UnreadableFileError",
    "UnsupportedFeatureError",
    "UnwritableFileError",
    "Version",
    "__version__",
]
