"""Module: options.py

Author: Michael Economou
Date: 2026-03-07

Command line options applied to every read/write call.

Usage:
    options = ExifToolOptions(format=Format.NUMERIC, ignore_minor_errors=True)
    options.serialize()  # ["-n", "-m"]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from exifbridge.core.tags import Format


class OverwriteMode(Enum):
    """How exiftool treats the original file when writing."""

    NONE = None
    COPY = "-overwrite_original"
    IN_PLACE = "-overwrite_original_in_place"


@dataclass(frozen=True)
class ExifToolOptions:
    """Immutable set of exiftool options."""

    format: Format | None = Format.HUMAN_READABLE
    ignore_minor_errors: bool = False
    extract_unknown: bool = False
    date_format: str | None = None
    coord_format: str | None = None
    charset: str | None = None
    password: str | None = None
    modules: tuple[str, ...] = field(default_factory=tuple)
    escape_html: bool = False
    escape_xml: bool = False
    lang: str | None = None
    duplicates: bool = False
    extract_embedded: bool = False
    overwrite: OverwriteMode = OverwriteMode.NONE

    @classmethod
    def from_format(cls, fmt: Format) -> ExifToolOptions:
        return cls(format=fmt)

    def serialize(self) -> list[str]:
        """Return the options as exiftool arguments, in a stable order."""
        args: list[str] = []
        if self.format is not None:
            args.extend(self.format.args)
        if self.ignore_minor_errors:
            args.append("-m")
        if self.extract_unknown:
            args.append("-u")
        if self.date_format:
            args += ["-dateFormat", self.date_format]
        if self.coord_format:
            args += ["-coordFormat", self.coord_format]
        if self.charset:
            args += ["-charset", self.charset]
        if self.password:
            args += ["-password", self.password]
        for module in self.modules:
            args += ["-use", module]
        if self.escape_html:
            args.append("-E")
        if self.escape_xml:
            args.append("-ex")
        if self.lang:
            args += ["-lang", self.lang]
        if self.duplicates:
            args.append("-duplicates")
        if self.extract_embedded:
            args.append("-extractEmbedded")
        if self.overwrite.value:
            args.append(self.overwrite.value)
        return args

    @property
    def overwrites_original(self) -> bool:
        return self.overwrite is OverwriteMode.COPY

    @property
    def overwrites_original_in_place(self) -> bool:
        return self.overwrite is OverwriteMode.IN_PLACE
