"""Module: exifbridge.config.app

Author: Michael Economou
Date: 2026-03-02

Application-level configuration: package info and logging settings.
"""

# =====================================
# APPLICATION INFORMATION
# =====================================

APP_NAME = "exifbridge"
APP_VERSION = "0.4.0"
APP_AUTHOR = "Michael Economou"

# =====================================
# LOGGING CONFIGURATION
# =====================================

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Console logging
LOG_TO_CONSOLE = True
LOG_CONSOLE_LEVEL = "INFO"

# File logging (only used when init_logging() receives a log_dir)
LOG_FILE_LEVEL = "INFO"
LOG_FILE_MAX_BYTES = 10_000_000  # 10MB per file
LOG_FILE_BACKUP_COUNT = 5

# Development logging settings
SHOW_DEV_ONLY_IN_CONSOLE = False
