"""
Module: test_exiftool_sessions.py

Author: Michael Economou
Date: 2026-03-13

End-to-end tests running real processes: a shell script standing in for
exiftool (POSIX only) and, when installed, the real exiftool.
"""

from __future__ import annotations

import threading
import time

import pytest

from exifbridge import ExifToolBuilder, StandardTag
from exifbridge.core.version import Version
from exifbridge.exceptions import ExifToolNotFoundError, UnsupportedFeatureError
from exifbridge.infra.process.command import CommandBuilder
from exifbridge.infra.process.executor import DefaultCommandExecutor

pytestmark = pytest.mark.posix_only


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0")
    return path


def _pid(meta: dict) -> str:
    return meta["Pid"]


class TestOneShot:
    """Tests for the default one-process-per-call strategy."""

    def test_version_query(self, fake_exiftool) -> None:
        with ExifToolBuilder().with_path(fake_exiftool("10.80")).build() as exiftool:
            assert exiftool.version == Version(10, 80, 0)
            assert not exiftool.is_running()

    def test_each_call_uses_a_new_process(self, fake_exiftool, image) -> None:
        with ExifToolBuilder().with_path(fake_exiftool()).build() as exiftool:
            first = exiftool.get_image_meta(image, ["Artist", "Pid"])
            second = exiftool.get_image_meta(image, ["Artist", "Pid"])

        assert first["Artist"] == "Jane Doe"
        assert _pid(first) != _pid(second)

    def test_missing_executable(self, tmp_path) -> None:
        with pytest.raises(ExifToolNotFoundError):
            ExifToolBuilder().with_path(str(tmp_path / "exiftool")).build()


class TestStayOpen:
    """Tests for a persistent "-stay_open" session."""

    def test_calls_share_one_process(self, fake_exiftool, image) -> None:
        with ExifToolBuilder().with_path(fake_exiftool()).enable_stay_open(60_000).build() as et:
            results = [et.get_image_meta(image, ["Pid", "Count"]) for _ in range(3)]
            assert et.is_running()

        assert len({_pid(meta) for meta in results}) == 1
        assert [meta["Count"] for meta in results] == ["1", "2", "3"]

    def test_stop_then_respawn(self, fake_exiftool, image) -> None:
        with ExifToolBuilder().with_path(fake_exiftool()).enable_stay_open(60_000).build() as et:
            before = et.get_image_meta(image, ["Pid", "Count"])
            et.stop()
            assert not et.is_running()
            after = et.get_image_meta(image, ["Pid", "Count"])

        assert _pid(before) != _pid(after)
        assert after["Count"] == "1"

    def test_idle_process_is_released(self, fake_exiftool, image) -> None:
        with ExifToolBuilder().with_path(fake_exiftool()).enable_stay_open(100).build() as et:
            et.get_image_meta(image, [StandardTag.ARTIST])
            deadline = time.monotonic() + 5
            while et.is_running() and time.monotonic() < deadline:
                time.sleep(0.02)

            assert not et.is_running()
            meta = et.get_image_meta(image, [StandardTag.ARTIST])

        assert meta == {StandardTag.ARTIST: "Jane Doe"}

    def test_old_exiftool_is_rejected(self, fake_exiftool) -> None:
        builder = ExifToolBuilder().with_path(fake_exiftool("8.00")).enable_stay_open()
        with pytest.raises(UnsupportedFeatureError):
            builder.build()

    def test_close_sequence_ends_process(self, fake_exiftool) -> None:
        """Test that the exit request makes the process end on its own."""
        executor = DefaultCommandExecutor()
        command = (
            CommandBuilder.builder(fake_exiftool())
            .add_argument("-stay_open", "True", "-@", "-")
            .build()
        )
        process = executor.start(command)
        process.write("-stay_open\nFalse\n")
        process.flush()

        deadline = time.monotonic() + 5
        while process.is_running() and time.monotonic() < deadline:
            time.sleep(0.02)

        assert not process.is_running()
        process.close()


class TestPool:
    def test_concurrent_calls_bounded_by_pool_size(self, fake_exiftool, image) -> None:
        """Test that concurrent callers never see more processes than members."""
        results: list[dict] = []
        lock = threading.Lock()

        with ExifToolBuilder().with_path(fake_exiftool()).with_pool_size(2).build() as et:

            def worker() -> None:
                meta = et.get_image_meta(image, ["Pid"])
                with lock:
                    results.append(meta)

            threads = [threading.Thread(target=worker) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(timeout=10)

        assert len(results) == 8
        assert 1 <= len({_pid(meta) for meta in results}) <= 2


@pytest.mark.exiftool
class TestRealExifTool:
    """Smoke tests against an installed exiftool."""

    def test_reads_file_type(self, tmp_path) -> None:
        image = tmp_path / "note.txt"
        image.write_text("hello", encoding="utf-8")

        with ExifToolBuilder().enable_stay_open(5_000).build() as exiftool:
            meta = exiftool.get_image_meta(image, [StandardTag.FILE_TYPE])
            all_meta = exiftool.get_all_image_meta(image)

        assert meta[StandardTag.FILE_TYPE] == "TXT"
        assert all_meta["FileName"] == "note.txt"


CLOSING_STDOUT_SCRIPT = """#!/bin/sh
if [ "$1" = "-ver" ]; then
    echo "12.40"
    exit 0
fi
while IFS= read -r line; do
    if [ "$line" = "-execute" ]; then
        echo "Artist: Jane Doe"
        exec 1>&-
        sleep 30
    fi
done
"""


class TestBrokenSession:
    def test_session_with_closed_stdout_is_respawned(self, tmp_path, image) -> None:
        """Test that a session whose stdout closed before {ready} is replaced."""
        script = tmp_path / "exiftool-broken"
        script.write_text(CLOSING_STDOUT_SCRIPT)
        script.chmod(0o755)

        with ExifToolBuilder().with_path(str(script)).enable_stay_open(60_000).build() as et:
            first = et.get_image_meta(image, ["Artist"])
            assert not et.is_running()
            second = et.get_image_meta(image, ["Artist"])

        assert first == {"Artist": "Jane Doe"}
        assert second == {"Artist": "Jane Doe"}
