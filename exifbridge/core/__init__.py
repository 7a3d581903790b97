"""Core layer: versions, schedulers, execution strategies, handlers and tags.

Author: Michael Economou
Date: 2026-03-06
"""

from exifbridge.core.cache import VersionCache, get_version_cache, load_version
from exifbridge.core.handlers import AllTagHandler, StopHandler, TagHandler
from exifbridge.core.options import ExifToolOptions, OverwriteMode
from exifbridge.core.schedulers import NoOpScheduler, TimerScheduler
from exifbridge.core.strategies import DefaultStrategy, PoolStrategy, StayOpenStrategy
from exifbridge.core.tags import Format, StandardTag, Tag, TagType, tag_name
from exifbridge.core.version import Version

__all__ = [
    "AllTagHandler",
    "DefaultStrategy",
    "ExifToolOptions",
    "Format",
    "NoOpScheduler",
    "OverwriteMode",
    "PoolStrategy",
    "StandardTag",
    "StayOpenStrategy",
    "StopHandler",
    "Tag",
    "TagHandler",
    "TagType",
    "TimerScheduler",
    "Version",
    "VersionCache",
    "get_version_cache",
    "load_version",
    "tag_name",
]
