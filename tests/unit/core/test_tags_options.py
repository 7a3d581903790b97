"""
Module: test_tags_options.py

Author: Michael Economou
Date: 2026-03-11

Tests for tags, output formats and ExifToolOptions.
"""

from __future__ import annotations

import dataclasses

import pytest

from exifbridge.config import EXIFTOOL_LIST_SEPARATOR
from exifbridge.core.options import ExifToolOptions, OverwriteMode
from exifbridge.core.tags import Format, StandardTag, Tag, TagType, tag_name


class TestFormat:
    def test_numeric_adds_n_flag(self) -> None:
        assert Format.NUMERIC.args == ("-n",)

    def test_human_readable_adds_nothing(self) -> None:
        assert Format.HUMAN_READABLE.args == ()


class TestTags:
    """Tests for Tag, StandardTag and tag_name."""

    def test_standard_tag_names(self) -> None:
        assert StandardTag.COMMENT.display_name == "XPComment"
        assert StandardTag.APERTURE.display_name == "ApertureValue"
        assert StandardTag.ISO.display_name == "ISO"

    def test_standard_tag_parse(self) -> None:
        assert StandardTag.ISO.parse("100") == 100
        assert StandardTag.APERTURE.parse("2.8") == pytest.approx(2.8)
        assert StandardTag.MAKE.parse("Canon") == "Canon"

    def test_array_values_are_split(self) -> None:
        raw = EXIFTOOL_LIST_SEPARATOR.join(["one", "two", "three"])
        assert StandardTag.IPTC_KEYWORDS.parse(raw) == ["one", "two", "three"]

    def test_numeric_parse_error(self) -> None:
        with pytest.raises(ValueError):
            TagType.INTEGER.parse("abc")

    def test_custom_tag(self) -> None:
        tag = Tag("MyTag")
        assert tag.display_name == "MyTag"
        assert tag.type is TagType.STRING
        assert str(tag) == "MyTag"
        assert tag == Tag("MyTag")

    def test_custom_tag_rejects_blank_name(self) -> None:
        with pytest.raises(ValueError):
            Tag("  ")
        with pytest.raises(TypeError):
            Tag(None)

    def test_tag_name(self) -> None:
        assert tag_name("Artist") == "Artist"
        assert tag_name(Tag("Artist")) == "Artist"
        assert tag_name(StandardTag.ARTIST) == "Artist"


class TestExifToolOptions:
    """Tests for ExifToolOptions serialization."""

    def test_defaults(self) -> None:
        options = ExifToolOptions()
        assert options.format is Format.HUMAN_READABLE
        assert options.serialize() == []
        assert not options.overwrites_original
        assert not options.overwrites_original_in_place

    def test_from_format(self) -> None:
        assert ExifToolOptions.from_format(Format.NUMERIC).serialize() == ["-n"]

    def test_serialize_order(self) -> None:
        """Test that every option is emitted in a stable order."""
        options = ExifToolOptions(
            format=Format.NUMERIC,
            ignore_minor_errors=True,
            extract_unknown=True,
            date_format="%Y-%m-%d",
            coord_format="%.6f",
            charset="filename=utf8",
            password="secret",
            modules=("MWG",),
            escape_html=True,
            escape_xml=True,
            lang="de",
            duplicates=True,
            extract_embedded=True,
            overwrite=OverwriteMode.IN_PLACE,
        )

        assert options.serialize() == [
            "-n",
            "-m",
            "-u",
            "-dateFormat",
            "%Y-%m-%d",
            "-coordFormat",
            "%.6f",
            "-charset",
            "filename=utf8",
            "-password",
            "secret",
            "-use",
            "MWG",
            "-E",
            "-ex",
            "-lang",
            "de",
            "-duplicates",
            "-extractEmbedded",
            "-overwrite_original_in_place",
        ]

    @pytest.mark.parametrize(
        ("mode", "expected", "copy", "in_place"),
        [
            (OverwriteMode.NONE, [], False, False),
            (OverwriteMode.COPY, ["-overwrite_original"], True, False),
            (OverwriteMode.IN_PLACE, ["-overwrite_original_in_place"], False, True),
        ],
    )
    def test_overwrite_modes(
        self, mode: OverwriteMode, expected: list[str], copy: bool, in_place: bool
    ) -> None:
        options = ExifToolOptions(format=None, overwrite=mode)
        assert options.serialize() == expected
        assert options.overwrites_original is copy
        assert options.overwrites_original_in_place is in_place

    def test_options_are_immutable(self) -> None:
        options = ExifToolOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.ignore_minor_errors = True
