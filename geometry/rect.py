"""
Grid Rectangle

Axis-aligned rectangle over grid coordinates. Top and left edges are
inclusive, bottom and right edges are exclusive, so the rectangle
``Rect(top=1, left=1, bottom=3, right=4)`` covers rows 1-2 and
columns 1-3.

Rectangles are used twice during recognition:
- in raw character coordinates, for the area a region occupies
- in logical coordinates, for the clause and entry blocks of a plane
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """
    Immutable half-open rectangle.

    Invariant: ``top <= bottom`` and ``left <= right``. A rectangle with
    zero width or height covers no cell; clause blocks of a table without
    inputs or annotations are such rectangles.
    """
    top: int
    left: int
    bottom: int
    right: int

    def __post_init__(self):
        """Validate edge ordering on creation."""
        if self.top > self.bottom or self.left > self.right:
            raise ValueError(f"Invalid rectangle edges: {self}")

    @property
    def width(self) -> int:
        """Number of columns covered."""
        return self.right - self.left

    @property
    def height(self) -> int:
        """Number of rows covered."""
        return self.bottom - self.top

    def inc_top(self, offset: int) -> 'Rect':
        """Return a copy with the top edge moved down by offset."""
        return Rect(self.top + offset, self.left, self.bottom, self.right)

    def unpack(self) -> Tuple[int, int, int, int]:
        """Return as (top, left, bottom, right) tuple."""
        return (self.top, self.left, self.bottom, self.right)

    def rows(self) -> range:
        return range(self.top, self.bottom)

    def columns(self) -> range:
        return range(self.left, self.right)

    def __str__(self) -> str:
        return f"({self.top},{self.left};{self.bottom},{self.right})"
