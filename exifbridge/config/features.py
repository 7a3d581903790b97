"""Module: exifbridge.config.features

Author: Michael Economou
Date: 2026-03-02

ExifTool settings: executable lookup, stay-open requirements,
idle cleanup delay and orphan-scan bounds.

Values can be overridden through environment variables:
- EXIFTOOL_PATH: path to the exiftool executable
- EXIFTOOL_PROCESS_CLEANUP_DELAY: idle delay (ms) before a stay-open
  process is closed
"""

import logging
import os

logger = logging.getLogger(__name__)

# =====================================
# EXIFTOOL EXECUTABLE
# =====================================

EXIFTOOL_DEFAULT_PATH = "exiftool"
EXIFTOOL_PATH_ENV = "EXIFTOOL_PATH"

# =====================================
# STAY-OPEN (PERSISTENT PROCESS) SETTINGS
# =====================================

# First exiftool release supporting "-stay_open True -@ -"
STAY_OPEN_MIN_VERSION = "8.36.0"

# Line printed by exiftool once a "-execute" command is complete
EXIFTOOL_READY_MARKER = "{ready}"

# Separator used by exiftool for list values ("-sep")
EXIFTOOL_LIST_SEPARATOR = "|>☃"

# Idle delay before a persistent process is released (10 minutes)
PROCESS_CLEANUP_DELAY_MS = 600_000
PROCESS_CLEANUP_DELAY_ENV = "EXIFTOOL_PROCESS_CLEANUP_DELAY"

CLEANUP_THREAD_NAME = "ExifTool Cleanup Timer"

# =====================================
# ORPHAN PROCESS SCAN
# =====================================

ORPHAN_SCAN_MAX_SECONDS = 0.5
ORPHAN_GRACEFUL_WAIT_SECONDS = 0.5


def get_exiftool_path() -> str:
    """Return the exiftool path from the environment or the default."""
    value = os.environ.get(EXIFTOOL_PATH_ENV, "").strip()
    return value or EXIFTOOL_DEFAULT_PATH


def get_cleanup_delay() -> int:
    """Return the idle cleanup delay in milliseconds.

    Invalid environment values are ignored (with a warning) and the
    default delay is used instead.
    """
    raw = os.environ.get(PROCESS_CLEANUP_DELAY_ENV, "").strip()
    if not raw:
        return PROCESS_CLEANUP_DELAY_MS

    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "[Config] Invalid %s value %r, using default %d ms",
            PROCESS_CLEANUP_DELAY_ENV,
            raw,
            PROCESS_CLEANUP_DELAY_MS,
        )
        return PROCESS_CLEANUP_DELAY_MS
