"""
Plane

Partitions a canvas into regions (logical, possibly merged, table cells)
and addresses them through a logical row/column matrix.

Region extraction:
1. Walk the grid row-major; the first unvisited interior cell met is the
   top-left corner of a region.
2. Extend right and down while cells stay interior; this bounds the
   candidate rectangle.
3. The candidate is a region only if every cell inside is interior and
   unvisited, and every cell of its frame is a border glyph. Otherwise the
   enclosed area is not rectangular and extraction fails.

Logical indexing:
    Distinct region top edges become logical rows and distinct left edges
    become logical columns. Logical cell (r, c) belongs to the region
    covering raw position (tops[r], lefts[c]); a region spanning several
    raw columns therefore shows up in several logical columns.

The logical matrix is the only mutable state: remove_first_column(),
remove_last_row() and pivot() reshape it in place during recognition.
All other methods are read-only queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np
from loguru import logger

from geometry import Point, Rect
from model import HitPolicy
from .canvas import (
    DOUBLE_HORIZONTAL_GLYPHS,
    DOUBLE_VERTICAL_GLYPHS,
    HORIZONTAL_CROSSING_GLYPHS,
    SHARED_CROSSING_GLYPH,
    VERTICAL_CROSSING_GLYPHS,
)
from .errors import (
    canvas_region_not_found,
    plane_cell_is_not_region,
    plane_column_is_out_of_range,
    plane_invalid_rule_number,
    plane_is_empty,
    plane_no_main_double_crossing,
    plane_row_is_out_of_range,
)
from .placement import HitPolicyPlacement, RuleNumbersPlacement

if TYPE_CHECKING:
    from .canvas import Canvas


@dataclass(frozen=True)
class Region:
    """
    One logical table cell.

    Attributes:
        rect: Interior area in raw character coordinates
        text: Trimmed interior text, lines joined with newlines
    """
    rect: Rect
    text: str


def extract_regions(canvas: 'Canvas') -> Tuple[List[Region], np.ndarray]:
    """
    Partition the interior of the canvas into rectangular regions.

    Returns:
        (regions, owners) where owners holds, for every raw cell, the
        index of the region covering it or -1 for border cells

    Raises:
        RecognizerError: CANVAS_REGION_NOT_FOUND for a non-rectangular area
    """
    interior = canvas.interior
    height, width = interior.shape
    owners = np.full((height, width), -1, dtype=int)
    regions: List[Region] = []

    for row in range(height):
        for column in range(width):
            if not interior[row, column] or owners[row, column] >= 0:
                continue
            right = column
            while right < width and interior[row, right]:
                right += 1
            bottom = row
            while bottom < height and interior[bottom, column]:
                bottom += 1
            rect = Rect(row, column, bottom, right)
            if not _is_enclosed(canvas, owners, rect):
                raise canvas_region_not_found(rect)
            owners[rect.top:rect.bottom, rect.left:rect.right] = len(regions)
            regions.append(Region(rect, canvas.text_in(rect)))

    return regions, owners


def _is_enclosed(canvas: 'Canvas', owners: np.ndarray, rect: Rect) -> bool:
    """Check that the rectangle is fully interior, unvisited and framed by borders."""
    top, left, bottom, right = rect.unpack()
    if not canvas.interior[top:bottom, left:right].all():
        return False
    if (owners[top:bottom, left:right] >= 0).any():
        return False
    grid = canvas.grid_layer
    return bool(
        grid[top - 1, left:right].all() and
        grid[bottom, left:right].all() and
        grid[top:bottom, left - 1].all() and
        grid[top:bottom, right].all()
    )


def _rule_number(text: str) -> Optional[int]:
    if text.isascii() and text.isdigit():
        return int(text)
    return None


def _count_rule_numbers(texts: List[str]) -> int:
    """Validate a 1, 2, 3... sequence and return its length."""
    for expected, text in enumerate(texts, 1):
        number = _rule_number(text)
        if number != expected:
            raise plane_invalid_rule_number(number if number is not None else expected)
    return len(texts)


def _leading_span(line: np.ndarray, value: int) -> int:
    """Number of leading entries equal to value."""
    span = 0
    while span < len(line) and line[span] == value:
        span += 1
    return span


class Plane:
    """
    Logical matrix of regions derived from a canvas.

    Attributes:
        canvas: Canvas the regions were extracted from
        regions: Extracted regions, in row-major order of their corners
        cells: Region index for each logical (row, column)
        double_rows: Per logical row, True when a double line runs above it
        double_columns: Per logical column, True when a double line runs left of it
    """

    def __init__(
        self,
        canvas: 'Canvas',
        regions: List[Region],
        cells: np.ndarray,
        double_rows: np.ndarray,
        double_columns: np.ndarray,
    ):
        self.canvas = canvas
        self.regions = regions
        self.cells = cells
        self.double_rows = double_rows
        self.double_columns = double_columns
        # Orientation-defining scans run on the untransformed plane only
        self._horizontal_crossing = self._find_horizontal_crossing()
        self._vertical_crossing = self._find_vertical_crossing()

    @classmethod
    def from_canvas(cls, canvas: 'Canvas') -> 'Plane':
        """
        Extract regions from the canvas and index them logically.

        Raises:
            RecognizerError: When the canvas has no regions or a logical
                cell falls on a border (misaligned merged cells)
        """
        regions, owners = extract_regions(canvas)
        if not regions:
            raise plane_is_empty()

        tops = sorted({region.rect.top for region in regions})
        lefts = sorted({region.rect.left for region in regions})

        cells = np.full((len(tops), len(lefts)), -1, dtype=int)
        for row, top in enumerate(tops):
            for column, left in enumerate(lefts):
                index = owners[top, left]
                if index < 0:
                    raise plane_cell_is_not_region(
                        f"logical cell ({row},{column}) at {Point(top, left)} is a border"
                    )
                cells[row, column] = index

        double_rows = np.array([
            any(canvas.char_at(top - 1, left) in DOUBLE_HORIZONTAL_GLYPHS for left in lefts)
            for top in tops
        ], dtype=bool)
        double_columns = np.array([
            any(canvas.char_at(top, left - 1) in DOUBLE_VERTICAL_GLYPHS for top in tops)
            for left in lefts
        ], dtype=bool)

        logger.debug(f"Extracted {len(regions)} regions into {len(tops)}x{len(lefts)} plane")
        return cls(canvas, regions, cells, double_rows, double_columns)

    @property
    def row_count(self) -> int:
        return self.cells.shape[0]

    @property
    def column_count(self) -> int:
        return self.cells.shape[1]

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def region_at(self, row: int, column: int) -> Region:
        """Region at logical (row, column)."""
        if not 0 <= row < self.row_count:
            raise plane_row_is_out_of_range()
        if not 0 <= column < self.column_count:
            raise plane_column_is_out_of_range()
        return self.regions[self.cells[row, column]]

    def region_text(self, row: int, column: int) -> str:
        """Trimmed text of the region at logical (row, column)."""
        return self.region_at(row, column).text

    def to_matrix(self) -> List[List[str]]:
        """Texts of all logical cells, row by row."""
        return [
            [self.region_text(row, column) for column in range(self.column_count)]
            for row in range(self.row_count)
        ]

    # ------------------------------------------------------------------
    # Orientation
    # ------------------------------------------------------------------

    def _first_double_row(self) -> Optional[int]:
        """First logical row below a double line, the top frame excluded."""
        rows = np.flatnonzero(self.double_rows[1:])
        return int(rows[0]) + 1 if rows.size > 0 else None

    def _first_double_column(self) -> Optional[int]:
        """First logical column right of a double line, the left frame excluded."""
        columns = np.flatnonzero(self.double_columns[1:])
        return int(columns[0]) + 1 if columns.size > 0 else None

    def _find_horizontal_crossing(self) -> Optional[Point]:
        region = self.regions[self.cells[0, 0]]
        has_code = HitPolicy.from_code(region.text) is not None
        corner = Point(region.rect.bottom, region.rect.right)
        glyph = self.canvas.char_at_point(corner)
        # Without inputs a horizontal table has the same borders as a vertical
        # table with one input; only the hit policy corner tells them apart.
        if glyph in HORIZONTAL_CROSSING_GLYPHS and (glyph != SHARED_CROSSING_GLYPH or has_code):
            return corner
        # A hit policy cell may end above the header line, next to the
        # allowed values row; follow the first column down to that line.
        header = self._first_double_row()
        if has_code and header is not None:
            rect = self.regions[self.cells[header, 0]].rect
            corner = Point(rect.top - 1, rect.right)
            if self.canvas.char_at_point(corner) in HORIZONTAL_CROSSING_GLYPHS:
                return corner
        return None

    def _find_vertical_crossing(self) -> Optional[Point]:
        region = self.regions[self.cells[-1, 0]]
        corner = Point(region.rect.top - 1, region.rect.right)
        if self.canvas.char_at_point(corner) in VERTICAL_CROSSING_GLYPHS:
            return corner
        # Same for a hit policy cell that ends left of the allowed values column
        column = self._first_double_column()
        if HitPolicy.from_code(region.text) is not None and column is not None:
            rect = self.regions[self.cells[-1, column]].rect
            corner = Point(rect.top - 1, rect.left - 1)
            if self.canvas.char_at_point(corner) in VERTICAL_CROSSING_GLYPHS:
                return corner
        return None

    def horizontal_double_crossing(self) -> Optional[Point]:
        """
        Crossing of the double header line with the thin line closing the
        hit policy column. Read at the bottom-right corner of the top-left
        region, or where the header line meets the first column when that
        region holds a hit policy code but ends higher up.
        """
        return self._horizontal_crossing

    def vertical_double_crossing(self) -> Optional[Point]:
        """
        Crossing of the double line closing the label columns with the thin
        line opening the hit policy row. Read at the top-right corner of the
        bottom-left region, or where that line meets the first rule column
        when the bottom-left region holds a hit policy code.
        """
        return self._vertical_crossing

    def recognize_hit_policy_placement(self) -> HitPolicyPlacement:
        """
        Look for a hit policy code in the top-left and bottom-left regions.

        A code in both corners is contradictory and reported as not
        present; the recognizer turns it into an orientation error.
        """
        top_left = HitPolicy.from_code(self.region_text(0, 0))
        bottom_left = HitPolicy.from_code(self.region_text(self.row_count - 1, 0))
        if top_left is not None and bottom_left is not None:
            return HitPolicyPlacement.not_present()
        if top_left is not None:
            return HitPolicyPlacement.top_left(top_left)
        if bottom_left is not None:
            return HitPolicyPlacement.bottom_left(bottom_left)
        return HitPolicyPlacement.not_present()

    def recognize_rule_numbers_placement(self) -> RuleNumbersPlacement:
        """
        Look for rule numbers in the first column below the header line, or
        in the last row right of the label columns. Without double lines the
        scans start after the corner region.

        Raises:
            RecognizerError: PLANE_INVALID_RULE_NUMBER when a sequence starts
                but does not continue 1, 2, 3...
        """
        first_column = self.cells[:, 0]
        start = self._first_double_row()
        if start is None:
            start = _leading_span(first_column, first_column[0])
        texts = [self.region_text(row, 0) for row in range(start, self.row_count)]
        if texts and _rule_number(texts[0]) is not None:
            return RuleNumbersPlacement.left_below(_count_rule_numbers(texts))

        last_row = self.cells[-1, :]
        start = self._first_double_column()
        if start is None:
            start = _leading_span(last_row, last_row[0])
        texts = [self.region_text(self.row_count - 1, column) for column in range(start, self.column_count)]
        if texts and _rule_number(texts[0]) is not None:
            return RuleNumbersPlacement.right_after(_count_rule_numbers(texts))

        return RuleNumbersPlacement.not_present()

    # ------------------------------------------------------------------
    # Horizontal table layout
    # ------------------------------------------------------------------

    def _header_height(self) -> int:
        """Index of the first logical row below the double header line."""
        rows = np.flatnonzero(self.double_rows)
        if rows.size == 0:
            raise plane_no_main_double_crossing()
        height = int(rows[0])
        if height == 0:
            raise plane_row_is_out_of_range()
        return height

    def _clause_columns(self) -> Tuple[int, int]:
        """First output column and first annotation column."""
        columns = np.flatnonzero(self.double_columns)
        outputs = int(columns[0]) if columns.size > 0 else self.column_count
        annotations = int(columns[1]) if columns.size > 1 else self.column_count
        return outputs, annotations

    def horz_input_clause_rect(self) -> Rect:
        outputs, _ = self._clause_columns()
        return Rect(0, 0, self._header_height(), outputs)

    def horz_input_entries_rect(self) -> Rect:
        outputs, _ = self._clause_columns()
        return Rect(self._header_height(), 0, self.row_count, outputs)

    def horz_output_clause_rect(self) -> Rect:
        outputs, annotations = self._clause_columns()
        return Rect(0, outputs, self._header_height(), annotations)

    def horz_output_entries_rect(self) -> Rect:
        outputs, annotations = self._clause_columns()
        return Rect(self._header_height(), outputs, self.row_count, annotations)

    def horz_annotation_clauses_rect(self) -> Rect:
        _, annotations = self._clause_columns()
        return Rect(0, annotations, self._header_height(), self.column_count)

    def horz_annotation_entries_rect(self) -> Rect:
        _, annotations = self._clause_columns()
        return Rect(self._header_height(), annotations, self.row_count, self.column_count)

    # ------------------------------------------------------------------
    # Region comparisons
    # ------------------------------------------------------------------

    def _block(self, rect: Rect) -> np.ndarray:
        if rect.bottom > self.row_count:
            raise plane_row_is_out_of_range()
        if rect.right > self.column_count:
            raise plane_column_is_out_of_range()
        return self.cells[rect.top:rect.bottom, rect.left:rect.right]

    def equal_regions_in_columns(self, rect: Rect) -> bool:
        """True when every column of the rectangle is covered by a single region."""
        block = self._block(rect)
        return all(np.unique(block[:, column]).size <= 1 for column in range(block.shape[1]))

    def unique_regions_in_columns(self, rect: Rect) -> bool:
        """True when no region repeats within any column of the rectangle."""
        block = self._block(rect)
        return all(
            np.unique(block[:, column]).size == block.shape[0]
            for column in range(block.shape[1])
        )

    def equal_regions(self, rect: Rect) -> bool:
        """True when the whole rectangle is covered by a single region."""
        return np.unique(self._block(rect)).size <= 1

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def remove_first_column(self) -> None:
        """Drop the rule numbers column of a horizontal table."""
        self.cells = self.cells[:, 1:]
        self.double_columns = self.double_columns[1:]

    def remove_last_row(self) -> None:
        """Drop the rule numbers row of a vertical table."""
        self.cells = self.cells[:-1, :]
        self.double_rows = self.double_rows[:-1]

    def pivot(self) -> None:
        """Transpose logical rows and columns."""
        self.cells = self.cells.T.copy()
        self.double_rows, self.double_columns = self.double_columns, self.double_rows

    def __str__(self) -> str:
        lines = []
        for row in range(self.row_count):
            if row > 0 and self.double_rows[row]:
                lines.append('=' * 8)
            texts = []
            for column in range(self.column_count):
                separator = '‖' if column > 0 and self.double_columns[column] else '|'
                text = self.region_text(row, column).replace('\n', ' ')
                texts.append(f"{separator} {text} ")
            lines.append(''.join(texts) + '|')
        return '\n'.join(lines)
