# -*- coding: utf-8 -*-
"""
src/markdownocr/core/geometry.py

Plain value types for points and axis-aligned rectangles. Coordinates use a
top-left origin, matching both Qt widgets and the mss pixel buffer.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "Rect":
        """
        Builds the normalized rectangle spanned by two corner points.

        The result is the same whichever point is passed first, so a drag in
        any of the four directions yields the same rectangle.
        """
        return cls(
            x=min(a.x, b.x),
            y=min(a.y, b.y),
            width=abs(b.x - a.x),
            height=abs(b.y - a.y),
        )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def exceeds(self, minimum: int) -> bool:
        """True if both width and height are strictly greater than `minimum`."""
        return self.width > minimum and self.height > minimum
