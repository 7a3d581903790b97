"""
Module: exifbridge.__main__

Allows the package to be executed as a module:
    python -m exifbridge
"""

import sys

from exifbridge.cli import main

if __name__ == "__main__":
    sys.exit(main())
