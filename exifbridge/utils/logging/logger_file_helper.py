"""Module: logger_file_helper.py

Author: Michael Economou
Date: 2026-03-02

Attach rotating file handlers to a logger, with optional filtering by
logger name.
"""

import logging
import os
from logging.handlers import RotatingFileHandler


def add_file_handler(
    logger: logging.Logger,
    log_path: str,
    level: int = logging.INFO,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    filter_by_name: str | None = None,
) -> RotatingFileHandler:
    """Attach a rotating file handler to a logger.

    Args:
        logger (logging.Logger): The logger to attach the handler to.
        log_path (str): Path to the log file.
        level (int): Logging level for this file handler (e.g., logging.ERROR).
        max_bytes (int): Maximum file size before rotating.
        backup_count (int): Number of backup files to keep.
        filter_by_name (str, optional): Only log records from loggers under this name.

    Returns:
        RotatingFileHandler: The handler that was added.

    """
    directory = os.path.dirname(log_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(formatter)

    if filter_by_name:
        file_handler.addFilter(logging.Filter(filter_by_name))

    logger.addHandler(file_handler)
    return file_handler
