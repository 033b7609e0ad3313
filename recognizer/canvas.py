"""
Canvas

Turns the text of a drawn decision table into a validated, rectangular
character grid in which every character is classified.

Input format:
    Customer discount                        <- optional information item name
    ┌───┬──────────┬───────╥──────┐
    │ U │ Customer │ Order ║      │
    ╞═══╪══════════╪═══════╬══════╡
    │ 1 │ Business │  <10  ║ 0.10 │
    └───┴──────────┴───────╨──────┘

Character classes:
- thin border: single-line box-drawing glyphs
- double border: double-line glyphs, marking the structural boundaries
  (header/rules, inputs/outputs/annotations)
- body: a space inside an enclosed cell
- text: any other character inside an enclosed cell

Validation rules:
1. The grid starts at the first line opening with a top-left corner; at
   most one plain text line (the information item name) may precede it.
2. Every grid row has exactly the width of the top border row.
3. Frame edges hold only the glyphs allowed on that edge.
4. Every arm of a border glyph meets a border glyph with the opposite arm,
   so the borders form closed rectilinear lines.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np
from loguru import logger

from geometry import Point, Rect
from .errors import (
    canvas_character_is_not_allowed,
    canvas_expected_characters_not_found,
    canvas_rectangle_not_closed,
)

CORNER_TOP_LEFT = '┌'
CORNER_TOP_RIGHT = '┐'
CORNER_BOTTOM_LEFT = '└'
CORNER_BOTTOM_RIGHT = '┘'

THIN_GLYPHS = '─│┌┐└┘├┤┬┴┼'
DOUBLE_GLYPHS = '═║╒╓╔╕╖╗╘╙╚╛╜╝╞╟╠╡╢╣╤╥╦╧╨╩╪╫╬'

# Glyphs allowed on the frame, corners excluded
TOP_EDGE_GLYPHS = '─┬╥═╤╦'
BOTTOM_EDGE_GLYPHS = '─┴╨═╧╩'
LEFT_EDGE_GLYPHS = '│├╞╟║╠'
RIGHT_EDGE_GLYPHS = '│┤╡╢║╣'

# Crossings marking the meta column (hit policy, rule numbers) of a
# horizontal table and the meta row of a vertical table
HORIZONTAL_CROSSING_GLYPHS = '╪╬'
VERTICAL_CROSSING_GLYPHS = '╫╬'
SHARED_CROSSING_GLYPH = '╬'

# Glyphs whose horizontal (or vertical) stroke is a double line
DOUBLE_HORIZONTAL_GLYPHS = '═╒╔╕╗╘╚╛╝╞╠╡╣╤╦╧╩╪╬'
DOUBLE_VERTICAL_GLYPHS = '║╓╔╖╗╙╚╜╝╟╠╢╣╥╦╨╩╫╬'

# Shown in layer dumps for blank cells that belong to a layer
LAYER_BLANK_MARKER = '▪'
LAYER_UNSET_MARKER = '.'

UP, DOWN, LEFT, RIGHT = range(4)

# Neighbour offset and the arm the neighbour must have to connect
_CONNECTIONS: Dict[int, Tuple[int, int, int]] = {
    UP: (-1, 0, DOWN),
    DOWN: (1, 0, UP),
    LEFT: (0, -1, RIGHT),
    RIGHT: (0, 1, LEFT),
}


def _arms(glyphs: str, up: bool, down: bool, left: bool, right: bool) -> Dict[str, Tuple[bool, ...]]:
    return {glyph: (up, down, left, right) for glyph in glyphs}


GLYPH_ARMS: Dict[str, Tuple[bool, ...]] = {
    **_arms('─═', False, False, True, True),
    **_arms('│║', True, True, False, False),
    **_arms('┌╒╓╔', False, True, False, True),
    **_arms('┐╕╖╗', False, True, True, False),
    **_arms('└╘╙╚', True, False, False, True),
    **_arms('┘╛╜╝', True, False, True, False),
    **_arms('├╞╟╠', True, True, False, True),
    **_arms('┤╡╢╣', True, True, True, False),
    **_arms('┬╤╥╦', False, True, True, True),
    **_arms('┴╧╨╩', True, False, True, True),
    **_arms('┼╪╫╬', True, True, True, True),
}

BORDER_GLYPHS = THIN_GLYPHS + DOUBLE_GLYPHS


def glyphs_with_arm(arm: int) -> List[str]:
    """Border glyphs having the given arm, in a stable order."""
    return [glyph for glyph in BORDER_GLYPHS if GLYPH_ARMS[glyph][arm]]


class Canvas:
    """
    Classified character grid of a drawn decision table.

    Created by scan(); immutable afterwards.

    Attributes:
        text: The scanned text
        origin: Position of the top-left corner in the scanned text
        information_item_name: Plain text line found above the grid
        content: Character matrix (rows x columns)
        text_layer / thin_layer / body_layer / grid_layer: Boolean layers
    """

    def __init__(
        self,
        text: str,
        rows: List[str],
        origin: Point,
        information_item_name: Optional[str] = None,
    ):
        self.text = text
        self.origin = origin
        self.information_item_name = information_item_name
        self.content = np.array([list(row) for row in rows], dtype='<U1')

        self.grid_layer = np.isin(self.content, list(BORDER_GLYPHS))
        self.thin_layer = np.isin(self.content, list(THIN_GLYPHS))
        self.body_layer = ~self.grid_layer & (self.content == ' ')
        self.text_layer = ~self.grid_layer & (self.content != ' ')

    @property
    def height(self) -> int:
        return self.content.shape[0]

    @property
    def width(self) -> int:
        return self.content.shape[1]

    @property
    def interior(self) -> np.ndarray:
        """Cells inside enclosed areas (body and text)."""
        return ~self.grid_layer

    def char_at(self, row: int, column: int) -> str:
        return str(self.content[row, column])

    def char_at_point(self, point: Point) -> str:
        return self.char_at(point.row, point.column)

    def is_border(self, row: int, column: int) -> bool:
        return bool(self.grid_layer[row, column])

    def is_interior(self, row: int, column: int) -> bool:
        return not self.grid_layer[row, column]

    def text_in(self, rect: Rect) -> str:
        """
        Text enclosed by the rectangle.

        Each line is trimmed, empty lines are dropped and the rest
        joined with newlines.
        """
        lines = []
        for row in rect.rows():
            line = ''.join(self.content[row, rect.left:rect.right]).strip()
            if line:
                lines.append(line)
        return '\n'.join(lines)

    def plane(self) -> 'Plane':
        """Extract regions from this canvas and build the plane."""
        from .plane import Plane
        return Plane.from_canvas(self)

    def layer_dump(self, layer: np.ndarray) -> str:
        """Render a layer over the grid: member cells keep their character."""
        lines = []
        for row in range(self.height):
            chars = []
            for column in range(self.width):
                if layer[row, column]:
                    ch = self.char_at(row, column)
                    chars.append(LAYER_BLANK_MARKER if ch == ' ' else ch)
                else:
                    chars.append(LAYER_UNSET_MARKER)
            lines.append(''.join(chars))
        return '\n'.join(lines)

    def display_text_layer(self) -> None:
        self._display_layer('TEXT LAYER', self.text_layer)

    def display_thin_layer(self) -> None:
        self._display_layer('THIN LAYER', self.thin_layer)

    def display_body_layer(self) -> None:
        self._display_layer('BODY LAYER', self.body_layer)

    def display_grid_layer(self) -> None:
        self._display_layer('GRID LAYER', self.grid_layer)

    def _display_layer(self, title: str, layer: np.ndarray) -> None:
        print(f"\n{title}")
        print(self.layer_dump(layer))

    def __str__(self) -> str:
        return '\n'.join(''.join(row) for row in self.content)


def scan(text: str) -> Canvas:
    """
    Scan the text of a drawn decision table into a canvas.

    Args:
        text: Decision table text, optionally preceded by a name line

    Returns:
        Validated Canvas

    Raises:
        RecognizerError: When the grid is missing, ragged or badly drawn
    """
    lines = text.splitlines()

    top_index: Optional[int] = None
    name_lines: List[str] = []
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(CORNER_TOP_LEFT):
            top_index = index
            break
        if any(ch in GLYPH_ARMS for ch in stripped) or name_lines:
            raise canvas_expected_characters_not_found([CORNER_TOP_LEFT])
        name_lines.append(stripped)

    if top_index is None:
        raise canvas_expected_characters_not_found([CORNER_TOP_LEFT])

    left = lines[top_index].index(CORNER_TOP_LEFT)
    start = Point(top_index, left)
    top_row = lines[top_index][left:].rstrip()
    width = len(top_row)
    if width < 2 or top_row[-1] != CORNER_TOP_RIGHT:
        raise canvas_expected_characters_not_found([CORNER_TOP_RIGHT])

    rows = [top_row]
    for index in range(top_index + 1, len(lines)):
        line = lines[index]
        margin = line[:left].strip()
        if margin:
            raise canvas_character_is_not_allowed(margin[0], [' '])
        row = line[left:].rstrip()
        if len(row) != width:
            raise canvas_rectangle_not_closed(start, Point(index, left + width - 1))
        rows.append(row)
        if row[0] == CORNER_BOTTOM_LEFT:
            break
    else:
        raise canvas_expected_characters_not_found([CORNER_BOTTOM_LEFT])

    _validate_frame(rows)
    _validate_connections(rows)

    information_item_name = name_lines[0] if name_lines else None
    logger.debug(f"Scanned canvas {len(rows)}x{width} at {start}")
    return Canvas(text, rows, start, information_item_name)


def _validate_frame(rows: List[str]) -> None:
    """Check the glyphs along the outer edges of the grid."""
    top, bottom = rows[0], rows[-1]

    if bottom[-1] != CORNER_BOTTOM_RIGHT:
        raise canvas_expected_characters_not_found([CORNER_BOTTOM_RIGHT])

    for ch in top[1:-1]:
        if ch not in TOP_EDGE_GLYPHS:
            raise canvas_character_is_not_allowed(ch, list(TOP_EDGE_GLYPHS))
    for ch in bottom[1:-1]:
        if ch not in BOTTOM_EDGE_GLYPHS:
            raise canvas_character_is_not_allowed(ch, list(BOTTOM_EDGE_GLYPHS))

    for row in rows[1:-1]:
        if row[0] not in LEFT_EDGE_GLYPHS:
            raise canvas_character_is_not_allowed(row[0], list(LEFT_EDGE_GLYPHS))
        if row[-1] not in RIGHT_EDGE_GLYPHS:
            raise canvas_character_is_not_allowed(row[-1], list(RIGHT_EDGE_GLYPHS))


def _validate_connections(rows: List[str]) -> None:
    """Check that every arm of every border glyph meets an opposite arm."""
    height, width = len(rows), len(rows[0])
    for row_index, row in enumerate(rows):
        for column_index, ch in enumerate(row):
            arms = GLYPH_ARMS.get(ch)
            if arms is None:
                continue
            for arm, (d_row, d_column, opposite) in _CONNECTIONS.items():
                if not arms[arm]:
                    continue
                r, c = row_index + d_row, column_index + d_column
                neighbour = rows[r][c] if 0 <= r < height and 0 <= c < width else ''
                if not GLYPH_ARMS.get(neighbour, (False,) * 4)[opposite]:
                    raise canvas_expected_characters_not_found(glyphs_with_arm(opposite))
