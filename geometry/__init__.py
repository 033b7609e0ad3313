"""
Grid Geometry

Value types shared by the canvas, the plane and the recognizer.

Key Components:
- Point: a (row, column) position in a character grid
- Rect: a half-open rectangle of grid positions
"""

from .point import Point
from .rect import Rect

__all__ = [
    'Point',
    'Rect',
]
