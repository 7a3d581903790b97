"""
Module: conftest.py

Author: Michael Economou
Date: 2026-03-10

Global pytest configuration and fixtures for the exifbridge test suite.
"""

import os
import shutil
import stat
import sys

# Add project root to sys.path so 'exifbridge' and 'tests.mocks' can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from exifbridge.core.cache import get_version_cache
from tests.mocks import FakeExecutor

FAKE_EXIFTOOL_SCRIPT = """#!/bin/sh
# Minimal exiftool stand-in: "-ver", one-shot reads and stay-open sessions.
if [ "$1" = "-ver" ]; then
    echo "{version}"
    exit 0
fi
if [ "$1" = "-stay_open" ]; then
    count=0
    while IFS= read -r line; do
        case "$line" in
            -stay_open)
                IFS= read -r next
                if [ "$next" = "False" ]; then
                    exit 0
                fi
                ;;
            -execute)
                count=$((count + 1))
                echo "Artist: Jane Doe"
                echo "Pid: $$"
                echo "Count: $count"
                echo "{{ready}}"
                ;;
        esac
    done
    exit 0
fi
echo "Artist: Jane Doe"
echo "Pid: $$"
echo "{{ready}}"
exit 0
"""


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line("markers", "exiftool: requires a real exiftool executable")
    config.addinivalue_line("markers", "posix_only: requires a POSIX shell and executable scripts")


def pytest_collection_modifyitems(session, config, items):
    """Skip tests whose environment requirements are not met."""
    _ = session
    _ = config

    skip_posix = pytest.mark.skip(reason="POSIX shell scripts not supported on this platform")
    skip_exiftool = pytest.mark.skip(reason="exiftool executable not found")
    has_exiftool = shutil.which(os.environ.get("EXIFTOOL_PATH") or "exiftool") is not None

    for item in items:
        if "posix_only" in item.keywords and sys.platform == "win32":
            item.add_marker(skip_posix)
        if "exiftool" in item.keywords and not has_exiftool:
            item.add_marker(skip_exiftool)


@pytest.fixture(autouse=True)
def clear_version_cache():
    """Isolate tests from the process-wide version cache."""
    get_version_cache().clear()
    yield
    get_version_cache().clear()


@pytest.fixture
def fake_executor():
    """Executor reporting exiftool 9.36 and answering every call with '{ready}'."""
    return FakeExecutor(version="9.36")


@pytest.fixture
def fake_exiftool(tmp_path):
    """Factory writing an executable fake exiftool script; returns its path."""

    def _create(version: str = "12.40") -> str:
        script = tmp_path / "exiftool"
        script.write_text(FAKE_EXIFTOOL_SCRIPT.format(version=version))
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _create
