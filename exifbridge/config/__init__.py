"""Module: exifbridge.config

Author: Michael Economou
Date: 2026-03-02

Configuration package for exifbridge.

- app: package info, logging
- features: exiftool path, stay-open requirements, cleanup delays

All settings are re-exported from this module:
    from exifbridge.config import STAY_OPEN_MIN_VERSION
"""

from exifbridge.config.app import *  # noqa: F401, F403
from exifbridge.config.features import *  # noqa: F401, F403
