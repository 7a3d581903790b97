"""Module: tags.py

Author: Michael Economou
Date: 2026-03-07

Metadata tags and output formats.

Tag names are the exiftool tag names printed with "-S" (short output),
e.g. "ISO" or "XPComment". Each tag carries a type hint used to convert
the raw text value; list values are joined by exiftool with
EXIFTOOL_LIST_SEPARATOR.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from exifbridge.config import EXIFTOOL_LIST_SEPARATOR


class TagType(Enum):
    """Type hint for the value of a tag."""

    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    ARRAY = "array"

    def parse(self, value: str) -> Any:
        """Convert a raw exiftool value.

        Raises:
            ValueError: If the value does not match a numeric type.

        """
        if self is TagType.INTEGER:
            return int(value)
        if self is TagType.DOUBLE:
            return float(value)
        if self is TagType.ARRAY:
            return value.split(EXIFTOOL_LIST_SEPARATOR)
        return value


@dataclass(frozen=True)
class Tag:
    """A tag identified by its exiftool name."""

    name: str
    type: TagType = TagType.STRING

    def __post_init__(self) -> None:
        if self.name is None:
            raise TypeError("Tag name should not be null")
        if not self.name.strip():
            raise ValueError("Tag name should not be empty")

    @property
    def display_name(self) -> str:
        return self.name

    def parse(self, value: str) -> Any:
        return self.type.parse(value)

    def __str__(self) -> str:
        return self.name


class StandardTag(Enum):
    """Commonly used tags, with their exiftool names and type hints."""

    ISO = ("ISO", TagType.INTEGER)
    APERTURE = ("ApertureValue", TagType.DOUBLE)
    WHITE_BALANCE = ("WhiteBalance", TagType.INTEGER)
    BRIGHTNESS = ("BrightnessValue", TagType.DOUBLE)
    CONTRAST = ("Contrast", TagType.INTEGER)
    SATURATION = ("Saturation", TagType.INTEGER)
    SHARPNESS = ("Sharpness", TagType.INTEGER)
    SHUTTER_SPEED = ("ShutterSpeedValue", TagType.DOUBLE)
    DIGITAL_ZOOM_RATIO = ("DigitalZoomRatio", TagType.DOUBLE)
    IMAGE_WIDTH = ("ImageWidth", TagType.INTEGER)
    IMAGE_HEIGHT = ("ImageHeight", TagType.INTEGER)
    X_RESOLUTION = ("XResolution", TagType.DOUBLE)
    Y_RESOLUTION = ("YResolution", TagType.DOUBLE)
    FLASH = ("Flash", TagType.INTEGER)
    METERING_MODE = ("MeteringMode", TagType.INTEGER)
    FNUMBER = ("FNumber", TagType.DOUBLE)
    FOCAL_LENGTH = ("FocalLength", TagType.DOUBLE)
    FOCAL_LENGTH_35MM = ("FocalLengthIn35mmFormat", TagType.INTEGER)
    EXPOSURE_TIME = ("ExposureTime", TagType.DOUBLE)
    EXPOSURE_COMPENSATION = ("ExposureCompensation", TagType.DOUBLE)
    EXPOSURE_PROGRAM = ("ExposureProgram", TagType.INTEGER)
    ORIENTATION = ("Orientation", TagType.INTEGER)
    COLOR_SPACE = ("ColorSpace", TagType.INTEGER)
    SOFTWARE = ("Software", TagType.STRING)
    MAKE = ("Make", TagType.STRING)
    MODEL = ("Model", TagType.STRING)
    LENS_MAKE = ("LensMake", TagType.STRING)
    LENS_MODEL = ("LensModel", TagType.STRING)
    OWNER_NAME = ("OwnerName", TagType.STRING)
    TITLE = ("XPTitle", TagType.STRING)
    AUTHOR = ("XPAuthor", TagType.STRING)
    SUBJECT = ("XPSubject", TagType.STRING)
    KEYWORDS = ("XPKeywords", TagType.STRING)
    COMMENT = ("XPComment", TagType.STRING)
    RATING = ("Rating", TagType.INTEGER)
    DATE_TIME_ORIGINAL = ("DateTimeOriginal", TagType.STRING)
    CREATE_DATE = ("CreateDate", TagType.STRING)
    GPS_LATITUDE = ("GPSLatitude", TagType.DOUBLE)
    GPS_LATITUDE_REF = ("GPSLatitudeRef", TagType.STRING)
    GPS_LONGITUDE = ("GPSLongitude", TagType.DOUBLE)
    GPS_LONGITUDE_REF = ("GPSLongitudeRef", TagType.STRING)
    GPS_ALTITUDE = ("GPSAltitude", TagType.DOUBLE)
    GPS_ALTITUDE_REF = ("GPSAltitudeRef", TagType.INTEGER)
    GPS_TIMESTAMP = ("GPSTimeStamp", TagType.STRING)
    ROTATION = ("Rotation", TagType.INTEGER)
    EXIF_VERSION = ("ExifVersion", TagType.STRING)
    LENS_ID = ("LensID", TagType.STRING)
    COPYRIGHT = ("Copyright", TagType.STRING)
    ARTIST = ("Artist", TagType.STRING)
    CREATOR = ("Creator", TagType.STRING)
    IPTC_KEYWORDS = ("Keywords", TagType.ARRAY)
    FILE_TYPE = ("FileType", TagType.STRING)
    FILE_SIZE = ("FileSize", TagType.INTEGER)
    MIME_TYPE = ("MIMEType", TagType.STRING)
    MEGA_PIXELS = ("Megapixels", TagType.DOUBLE)
    CREATION_DATE = ("CreationDate", TagType.STRING)

    def __init__(self, tag_name: str, tag_type: TagType) -> None:
        self.tag = Tag(tag_name, tag_type)

    @property
    def display_name(self) -> str:
        return self.tag.name

    def parse(self, value: str) -> Any:
        return self.tag.parse(value)


class Format(Enum):
    """Output format of tag values."""

    NUMERIC = ("-n",)
    HUMAN_READABLE = ()

    @property
    def args(self) -> tuple[str, ...]:
        return self.value


def tag_name(tag: Tag | StandardTag | str) -> str:
    """Return the exiftool name of a Tag, a StandardTag or a plain name."""
    if isinstance(tag, str):
        return tag
    return tag.display_name
