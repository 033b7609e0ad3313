"""
Recognizer

Drives a canvas and its plane through a fixed decision procedure and
exposes the decoded decision table as plain attributes.

Procedure:
1. Scan the text into a canvas, extract the plane.
2. Decide the orientation from the double crossings and the placement of
   the hit policy and rule numbers.
3. Reduce both orientations to a horizontal plane without rule numbers:
   - rule as row:    drop the rule numbers column
   - rule as column: drop the rule numbers row, then pivot
4. Read clauses, values and entries from the horizontal plane.

The first failure aborts recognition; a partially recognized table is
never returned.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger

from geometry import Rect
from model import DecisionTableOrientation, HitPolicy
from .canvas import Canvas, scan
from .config import RecognizerSettings
from .errors import (
    expected_bottom_left_hit_policy_placement,
    expected_left_below_rule_numbers_placement,
    expected_no_rule_numbers_present,
    expected_right_after_rule_numbers_placement,
    expected_top_left_hit_policy_placement,
    invalid_input_expressions,
    no_output_clause,
    plane_invalid_output_clause,
    recognizing_cross_tab_not_supported_yet,
    too_many_rows_in_input_clause,
)
from .placement import HitPolicyPlacement, RuleNumbersPlacement
from .plane import Plane


class Recognizer:
    """
    Decision table recognized from its drawn text.

    Usage:
        recognizer = Recognizer.recognize(text)
        print(recognizer.hit_policy, recognizer.input_expressions)

    Attributes:
        canvas: Canvas used during recognition
        plane: Plane used during recognition, left in horizontal form
        information_item_name: Name line found above the table, if any
        hit_policy_placement / rule_numbers_placement: Where the metadata was found
        hit_policy: Recognized hit policy
        orientation: Recognized table orientation
        input_clause_count / input_expressions / input_values / input_entries
        output_clause_count / output_label / output_components / output_values / output_entries
        annotation_clause_count / annotations / annotation_entries
        rule_count: Number of rules (rows of entries)
    """

    def __init__(self, canvas: Canvas, plane: Plane, settings: Optional[RecognizerSettings] = None):
        self.settings = settings or RecognizerSettings()
        self.canvas = canvas
        self.plane = plane
        self.information_item_name: Optional[str] = canvas.information_item_name
        self.hit_policy_placement = HitPolicyPlacement.not_present()
        self.hit_policy = HitPolicy.UNIQUE
        self.rule_numbers_placement = RuleNumbersPlacement.not_present()
        self.orientation = DecisionTableOrientation.CROSS_TABLE
        self.input_clause_count = 0
        self.input_expressions: List[str] = []
        self.input_values: List[str] = []
        self.input_entries: List[List[str]] = []
        self.output_clause_count = 0
        self.output_label: Optional[str] = None
        self.output_components: List[str] = []
        self.output_values: List[str] = []
        self.output_entries: List[List[str]] = []
        self.annotation_clause_count = 0
        self.annotations: List[str] = []
        self.annotation_entries: List[List[str]] = []
        self.rule_count = 0

    @classmethod
    def recognize(cls, text: str, settings: Optional[RecognizerSettings] = None) -> 'Recognizer':
        """
        Recognize the decision table drawn in the text.

        Args:
            text: Decision table text
            settings: Optional settings, the trace flag in particular

        Returns:
            Fully populated Recognizer

        Raises:
            RecognizerError: On the first structural problem found
        """
        canvas = scan(text)
        recognizer = cls(canvas, canvas.plane(), settings)
        recognizer.recognize_table_components()
        logger.debug(
            f"Recognized {recognizer.orientation.display_name} table: "
            f"{recognizer.input_clause_count} inputs, {recognizer.output_clause_count} outputs, "
            f"{recognizer.annotation_clause_count} annotations, {recognizer.rule_count} rules"
        )
        recognizer.trace()
        return recognizer

    def recognize_table_components(self) -> None:
        """Recognize the orientation, then read the components accordingly."""
        self._recognize_orientation()
        if self.orientation is DecisionTableOrientation.RULE_AS_ROW:
            self.plane.remove_first_column()
            self._recognize_horizontal_table()
        elif self.orientation is DecisionTableOrientation.RULE_AS_COLUMN:
            self.plane.remove_last_row()
            self.plane.pivot()
            self._recognize_horizontal_table()
        else:
            self._recognize_crosstab_table()

    def _accept(self, orientation: DecisionTableOrientation) -> None:
        self.hit_policy = self.hit_policy_placement.hit_policy()
        self.orientation = orientation
        self.rule_count = self.rule_numbers_placement.rule_count()

    def _recognize_orientation(self) -> None:
        self.hit_policy_placement = self.plane.recognize_hit_policy_placement()
        self.rule_numbers_placement = self.plane.recognize_rule_numbers_placement()
        hit_policy = self.hit_policy_placement
        rule_numbers = self.rule_numbers_placement
        horizontal = self.plane.horizontal_double_crossing() is not None
        vertical = self.plane.vertical_double_crossing() is not None

        # A vertical table with one input and allowed values draws a crossing
        # under its first label too; the placements settle it.
        if horizontal and vertical and hit_policy.is_bottom_left and rule_numbers.is_right_after:
            horizontal = False

        if horizontal:
            if not hit_policy.is_top_left:
                raise expected_top_left_hit_policy_placement()
            if not rule_numbers.is_left_below:
                raise expected_left_below_rule_numbers_placement()
            self._accept(DecisionTableOrientation.RULE_AS_ROW)
        elif vertical:
            if not hit_policy.is_bottom_left:
                raise expected_bottom_left_hit_policy_placement()
            if not rule_numbers.is_right_after:
                raise expected_right_after_rule_numbers_placement()
            self._accept(DecisionTableOrientation.RULE_AS_COLUMN)
        elif hit_policy.is_top_left:
            if not rule_numbers.is_left_below:
                raise expected_left_below_rule_numbers_placement()
            self._accept(DecisionTableOrientation.RULE_AS_ROW)
        elif hit_policy.is_bottom_left:
            if not rule_numbers.is_right_after:
                raise expected_right_after_rule_numbers_placement()
            self._accept(DecisionTableOrientation.RULE_AS_COLUMN)
        else:
            if not rule_numbers.is_not_present:
                raise expected_no_rule_numbers_present()
            # Rules of a crosstab are counted while reading its body
            self._accept(DecisionTableOrientation.CROSS_TABLE)

        logger.debug(f"Orientation: {self.orientation.display_name}, hit policy: {self.hit_policy}")

    def _row_texts(self, row: int, rect: Rect) -> List[str]:
        return [self.plane.region_text(row, column) for column in rect.columns()]

    def _entries(self, rect: Rect) -> List[List[str]]:
        return [self._row_texts(row, rect) for row in rect.rows()]

    def _recognize_horizontal_table(self) -> None:
        plane = self.plane

        # Input clauses
        r = plane.horz_input_clause_rect()
        self.input_clause_count = r.width
        if r.height == 1:
            input_values_present = False
        elif r.height == 2:
            # Identical regions in both rows mean a merged expression cell
            input_values_present = not plane.equal_regions_in_columns(r)
        elif r.height == 3:
            # Two rows of expression over one row of values
            if not plane.unique_regions_in_columns(r.inc_top(1)):
                raise invalid_input_expressions()
            input_values_present = True
        else:
            raise too_many_rows_in_input_clause()

        self.input_expressions = self._row_texts(0, r)
        if input_values_present:
            self.input_values = self._row_texts(r.bottom - 1, r)
        self.input_entries = self._entries(plane.horz_input_entries_rect())

        # Output clauses
        r = plane.horz_output_clause_rect()
        self.output_clause_count = r.width
        if r.width == 0:
            raise no_output_clause()
        if r.width == 1:
            if r.height == 1:
                self.output_label = plane.region_text(r.top, r.left) or None
            elif r.height == 2:
                if not input_values_present or plane.equal_regions(r):
                    raise plane_invalid_output_clause()
                self.output_label = plane.region_text(r.top, r.left) or None
                self.output_values = [plane.region_text(r.top + 1, r.left)]
            else:
                raise too_many_rows_in_input_clause()
        else:
            if r.height == 1:
                self.output_components = self._row_texts(r.top, r)
            elif r.height == 2:
                if input_values_present:
                    self.output_components = self._row_texts(r.top, r)
                    self.output_values = self._row_texts(r.top + 1, r)
                else:
                    self.output_label = plane.region_text(r.top, r.left)
                    self.output_components = self._row_texts(r.top + 1, r)
            elif r.height == 3:
                self.output_label = plane.region_text(r.top, r.left)
                self.output_components = self._row_texts(r.top + 1, r)
                self.output_values = self._row_texts(r.top + 2, r)
            else:
                raise too_many_rows_in_input_clause()
        self.output_entries = self._entries(plane.horz_output_entries_rect())

        # Annotations, possibly none
        r = plane.horz_annotation_clauses_rect()
        self.annotation_clause_count = r.width
        self.annotations = self._row_texts(r.top, r)
        self.annotation_entries = self._entries(plane.horz_annotation_entries_rect())

    def _recognize_crosstab_table(self) -> None:
        self.rule_count = 0
        raise recognizing_cross_tab_not_supported_yet()

    def trace(self) -> None:
        """Print the recognized components when tracing is enabled."""
        if not self.settings.trace:
            return
        print(self.trace_text())

    def trace_text(self) -> str:
        sections = [
            ('input expressions', [self.input_expressions]),
            ('input values', [self.input_values]),
            ('input entries', self.input_entries),
            ('output label', [[self.output_label] if self.output_label is not None else []]),
            ('output components', [self.output_components]),
            ('output values', [self.output_values]),
            ('output entries', self.output_entries),
            ('annotations', [self.annotations]),
            ('annotation entries', self.annotation_entries),
        ]
        lines = []
        for title, rows in sections:
            lines.append(f"\n>> {title}:")
            for row in rows:
                lines.append('|' + ''.join(f"{_trace_cell(text)}|" for text in row))
        return '\n'.join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the recognized table to a dictionary."""
        return {
            'information_item_name': self.information_item_name,
            'orientation': self.orientation.name,
            'hit_policy': self.hit_policy.code,
            'hit_policy_placement': self.hit_policy_placement.to_dict(),
            'rule_numbers_placement': self.rule_numbers_placement.to_dict(),
            'rule_count': self.rule_count,
            'input_clause_count': self.input_clause_count,
            'input_expressions': self.input_expressions,
            'input_values': self.input_values,
            'input_entries': self.input_entries,
            'output_clause_count': self.output_clause_count,
            'output_label': self.output_label,
            'output_components': self.output_components,
            'output_values': self.output_values,
            'output_entries': self.output_entries,
            'annotation_clause_count': self.annotation_clause_count,
            'annotations': self.annotations,
            'annotation_entries': self.annotation_entries,
        }


def _trace_cell(text: str) -> str:
    return text.replace('\n', ' ').strip()
