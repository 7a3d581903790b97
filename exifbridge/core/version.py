"""Module: version.py

Author: Michael Economou
Date: 2026-03-06

Version of the native exiftool program.

exiftool reports versions such as "9.36" or "12.76"; missing components
default to 0, so "10" parses as 10.0.0.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class Version:
    """A major.minor.patch version, ordered lexicographically."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.patch):
            if part < 0:
                raise ValueError(f"Version components must be non-negative: {self.as_tuple()}")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse dot-delimited numeric text.

        Args:
            text: Version text such as "9.36" (surrounding whitespace ignored).

        Returns:
            Parsed Version.

        Raises:
            TypeError: If text is None.
            ValueError: If text is empty, has more than three components,
                or a component is not a non-negative integer.

        """
        if text is None:
            raise TypeError("Version string should not be null")
        stripped = text.strip()
        if not stripped:
            raise ValueError("Version string should not be empty")

        parts = stripped.split(".")
        if len(parts) > 3:
            raise ValueError(f"Invalid version string: {text!r}")

        try:
            numbers = [int(part) for part in parts]
        except ValueError:
            raise ValueError(f"Invalid version string: {text!r}") from None

        numbers += [0] * (3 - len(numbers))
        return cls(*numbers)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
