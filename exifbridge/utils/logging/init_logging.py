"""Module: init_logging.py

Author: Michael Economou
Date: 2026-03-02

Single entry point to initialize logging for applications using exifbridge
(the command line entry point calls it; library code never does).

Functions:
init_logging(app_name, log_dir, console_level): console handler with
DevOnlyFilter, plus rotating activity/error files when log_dir is given.
"""

import contextlib
import logging
import os
import sys

from exifbridge.config.app import (
    LOG_CONSOLE_LEVEL,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_LEVEL,
    LOG_FILE_MAX_BYTES,
    LOG_TO_CONSOLE,
)
from exifbridge.utils.logging.logger_file_helper import add_file_handler
from exifbridge.utils.logging.logger_helper import DevOnlyFilter

_CONSOLE_HANDLER_NAME = "exifbridge-console"


def init_logging(
    app_name: str = "exifbridge",
    log_dir: str | None = None,
    console_level: int | None = None,
) -> logging.Logger:
    """Initialize logging on the root logger.

    Calling it twice does not add a second console handler.

    Args:
        app_name (str): The base name for log files (e.g., 'exifbridge').
        log_dir (str, optional): Directory for rotating log files. No file
            logging when omitted.
        console_level (int, optional): Console level, defaults to LOG_CONSOLE_LEVEL.

    Returns:
        logging.Logger: The root logger.

    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # Accept everything; handlers filter levels

    if console_level is None:
        console_level = getattr(logging, LOG_CONSOLE_LEVEL, logging.INFO)

    existing = [h for h in root.handlers if h.get_name() == _CONSOLE_HANDLER_NAME]
    if LOG_TO_CONSOLE and not existing:
        console_handler = logging.StreamHandler(sys.stderr)
        with contextlib.suppress(Exception):
            console_handler.stream.reconfigure(encoding="utf-8")
        console_handler.set_name(_CONSOLE_HANDLER_NAME)
        console_handler.setLevel(console_level)
        console_handler.addFilter(DevOnlyFilter())
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(console_handler)
    else:
        for handler in existing:
            handler.setLevel(console_level)

    if log_dir:
        add_file_handler(
            root,
            os.path.join(log_dir, f"{app_name}_activity.log"),
            level=getattr(logging, LOG_FILE_LEVEL, logging.INFO),
            max_bytes=LOG_FILE_MAX_BYTES,
            backup_count=LOG_FILE_BACKUP_COUNT,
        )
        add_file_handler(
            root,
            os.path.join(log_dir, f"{app_name}_errors.log"),
            level=logging.ERROR,
            max_bytes=LOG_FILE_MAX_BYTES,
            backup_count=LOG_FILE_BACKUP_COUNT,
        )

    return root
