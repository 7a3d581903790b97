"""Module: cli.py

Author: Michael Economou
Date: 2026-03-09

Command line interface:

    python -m exifbridge version
    python -m exifbridge read photo.jpg ISO Make
    python -m exifbridge write photo.jpg Artist=Me Rating=5
    python -m exifbridge cleanup
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from exifbridge.config import APP_NAME, APP_VERSION
from exifbridge.core.tags import Format
from exifbridge.exceptions import ExifToolError
from exifbridge.exiftool import ExifTool, ExifToolBuilder
from exifbridge.infra.process.cleanup import cleanup_orphaned_exiftool_processes
from exifbridge.utils.logging.init_logging import init_logging
from exifbridge.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME, description="Read and write image metadata with exiftool"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--path", help="Path to the exiftool executable")
    parser.add_argument(
        "--stay-open",
        action="store_true",
        help="Keep one exiftool process open for the whole run",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("version", help="Print the exiftool version")

    read = sub.add_parser("read", help="Print tags of an image (all tags when none given)")
    read.add_argument("file")
    read.add_argument("tags", nargs="*")
    read.add_argument("--human", action="store_true", help="Human readable values")

    write = sub.add_parser("write", help="Write TAG=VALUE pairs to an image")
    write.add_argument("file")
    write.add_argument("assignments", nargs="+", metavar="TAG=VALUE")

    sub.add_parser("cleanup", help="Terminate orphaned exiftool processes")
    return parser


def _parse_assignments(assignments: Sequence[str]) -> dict[str, str]:
    values = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid assignment (expected TAG=VALUE): {item}")
        values[name.strip()] = value
    return values


def _build_exiftool(args: argparse.Namespace) -> ExifTool:
    builder = ExifToolBuilder()
    if args.path:
        builder.with_path(args.path)
    if args.stay_open:
        builder.enable_stay_open()
    return builder.build()


def _run(args: argparse.Namespace) -> int:
    if args.command == "cleanup":
        found, killed = cleanup_orphaned_exiftool_processes()
        print(f"Found {found} exiftool process(es), killed {killed}")
        return 0

    with _build_exiftool(args) as exiftool:
        if args.command == "version":
            print(exiftool.version)
        elif args.command == "read":
            fmt = Format.HUMAN_READABLE if args.human else Format.NUMERIC
            if args.tags:
                meta = exiftool.get_image_meta(args.file, args.tags, fmt)
            else:
                meta = exiftool.get_all_image_meta(args.file, fmt)
            for name, value in meta.items():
                print(f"{name}: {value}")
        elif args.command == "write":
            exiftool.set_image_meta(args.file, _parse_assignments(args.assignments))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point.

    Returns:
        Exit code: 0 on success, 1 on exiftool errors, 2 on invalid input.

    """
    args = _build_parser().parse_args(argv)
    init_logging(APP_NAME, console_level=logging.DEBUG if args.verbose else None)

    try:
        return _run(args)
    except ValueError as e:
        logger.error("[CLI] %s", e)
        return 2
    except (ExifToolError, OSError) as e:
        logger.error("[CLI] %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
