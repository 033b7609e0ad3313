"""
Grid Point

A position in a character grid, addressed by row and column.
Points order row-major, so sorting a list of points walks the grid
top-to-bottom, left-to-right.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Point:
    """
    Immutable grid coordinate.

    Example:
        corner = Point(row=2, column=4)
        glyph = canvas.char_at_point(corner)
    """
    row: int
    column: int

    def __str__(self) -> str:
        return f"({self.row},{self.column})"
