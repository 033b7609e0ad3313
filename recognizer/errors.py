"""
Recognizer Errors

Every failure of the recognition process is reported as a single
exception type, RecognizerError, tagged with an ErrorKind. The kinds are
flat and descriptive; the payload carries the data the kind refers to
(offending character, rectangle, rule number, ...).

Errors are raised through the factory functions below and are never
caught inside the recognizer: the first failure aborts recognition.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, List, Tuple

from geometry import Point, Rect


class ErrorKind(Enum):
    """Kinds of recognition failures."""

    # Canvas
    CANVAS_EXPECTED_CHARACTERS_NOT_FOUND = auto()
    CANVAS_CHARACTER_IS_NOT_ALLOWED = auto()
    CANVAS_RECTANGLE_NOT_CLOSED = auto()
    CANVAS_REGION_NOT_FOUND = auto()

    # Plane
    PLANE_IS_EMPTY = auto()
    PLANE_ROW_IS_OUT_OF_RANGE = auto()
    PLANE_COLUMN_IS_OUT_OF_RANGE = auto()
    PLANE_NO_MAIN_DOUBLE_CROSSING = auto()
    PLANE_INVALID_OUTPUT_CLAUSE = auto()
    PLANE_INVALID_RULE_NUMBER = auto()
    PLANE_CELL_IS_NOT_REGION = auto()

    # Recognizer
    INVALID_INPUT_EXPRESSIONS = auto()
    TOO_MANY_ROWS_IN_INPUT_CLAUSE = auto()
    NO_OUTPUT_CLAUSE = auto()
    EXPECTED_LEFT_BELOW_RULE_NUMBERS_PLACEMENT = auto()
    EXPECTED_RIGHT_AFTER_RULE_NUMBERS_PLACEMENT = auto()
    EXPECTED_TOP_LEFT_HIT_POLICY_PLACEMENT = auto()
    EXPECTED_BOTTOM_LEFT_HIT_POLICY_PLACEMENT = auto()
    EXPECTED_NO_RULE_NUMBERS_PRESENT = auto()
    RECOGNIZING_CROSS_TAB_NOT_SUPPORTED_YET = auto()


class RecognizerError(Exception):
    """
    Failure of decision table recognition.

    Attributes:
        kind: What went wrong
        payload: Data attached to the failure, possibly empty
        message: Description without the error type prefix
    """

    def __init__(self, kind: ErrorKind, message: str, *payload: Any):
        super().__init__(f"RecognizerError: {message}")
        self.kind = kind
        self.message = message
        self.payload: Tuple[Any, ...] = payload

    def __repr__(self) -> str:
        return f"RecognizerError({self.kind.name}, {self.message!r})"


def _chars(chars: List[str]) -> str:
    return '[' + ', '.join(f"'{ch}'" for ch in chars) + ']'


def canvas_expected_characters_not_found(chars: List[str]) -> RecognizerError:
    return RecognizerError(
        ErrorKind.CANVAS_EXPECTED_CHARACTERS_NOT_FOUND,
        f"expected characters not found: {_chars(chars)}",
        list(chars),
    )


def canvas_character_is_not_allowed(ch: str, allowed: List[str]) -> RecognizerError:
    return RecognizerError(
        ErrorKind.CANVAS_CHARACTER_IS_NOT_ALLOWED,
        f"character '{ch}' is not allowed in {_chars(allowed)}",
        ch,
        list(allowed),
    )


def canvas_rectangle_not_closed(p1: Point, p2: Point) -> RecognizerError:
    return RecognizerError(
        ErrorKind.CANVAS_RECTANGLE_NOT_CLOSED,
        f"rectangle is not closed, start point: {p1}, end point: {p2}",
        p1,
        p2,
    )


def canvas_region_not_found(rect: Rect) -> RecognizerError:
    return RecognizerError(
        ErrorKind.CANVAS_REGION_NOT_FOUND,
        f"region not found, rect: {rect}",
        rect,
    )


def plane_is_empty() -> RecognizerError:
    return RecognizerError(ErrorKind.PLANE_IS_EMPTY, "plane is empty")


def plane_row_is_out_of_range() -> RecognizerError:
    return RecognizerError(ErrorKind.PLANE_ROW_IS_OUT_OF_RANGE, "plane row is out of range")


def plane_column_is_out_of_range() -> RecognizerError:
    return RecognizerError(ErrorKind.PLANE_COLUMN_IS_OUT_OF_RANGE, "plane column is out of range")


def plane_no_main_double_crossing() -> RecognizerError:
    return RecognizerError(ErrorKind.PLANE_NO_MAIN_DOUBLE_CROSSING, "plane no main double crossing")


def plane_invalid_output_clause() -> RecognizerError:
    return RecognizerError(ErrorKind.PLANE_INVALID_OUTPUT_CLAUSE, "plane invalid output clause")


def plane_invalid_rule_number(num: int) -> RecognizerError:
    return RecognizerError(
        ErrorKind.PLANE_INVALID_RULE_NUMBER,
        f"plane invalid rule number: {num}",
        num,
    )


def plane_cell_is_not_region(details: str) -> RecognizerError:
    return RecognizerError(
        ErrorKind.PLANE_CELL_IS_NOT_REGION,
        f"not a region cell in plane: {details}",
        details,
    )


def invalid_input_expressions() -> RecognizerError:
    return RecognizerError(ErrorKind.INVALID_INPUT_EXPRESSIONS, "invalid input expressions")


def too_many_rows_in_input_clause() -> RecognizerError:
    return RecognizerError(ErrorKind.TOO_MANY_ROWS_IN_INPUT_CLAUSE, "too many rows in input clause")


def no_output_clause() -> RecognizerError:
    return RecognizerError(ErrorKind.NO_OUTPUT_CLAUSE, "no output clause")


def expected_left_below_rule_numbers_placement() -> RecognizerError:
    return RecognizerError(
        ErrorKind.EXPECTED_LEFT_BELOW_RULE_NUMBERS_PLACEMENT,
        "expected left-below rule numbers placement",
    )


def expected_right_after_rule_numbers_placement() -> RecognizerError:
    return RecognizerError(
        ErrorKind.EXPECTED_RIGHT_AFTER_RULE_NUMBERS_PLACEMENT,
        "expected right-after rule numbers placement",
    )


def expected_top_left_hit_policy_placement() -> RecognizerError:
    return RecognizerError(
        ErrorKind.EXPECTED_TOP_LEFT_HIT_POLICY_PLACEMENT,
        "expected top-left hit policy placement",
    )


def expected_bottom_left_hit_policy_placement() -> RecognizerError:
    return RecognizerError(
        ErrorKind.EXPECTED_BOTTOM_LEFT_HIT_POLICY_PLACEMENT,
        "expected bottom-left hit policy placement",
    )


def expected_no_rule_numbers_present() -> RecognizerError:
    return RecognizerError(
        ErrorKind.EXPECTED_NO_RULE_NUMBERS_PRESENT,
        "expected no rule numbers present",
    )


def recognizing_cross_tab_not_supported_yet() -> RecognizerError:
    return RecognizerError(
        ErrorKind.RECOGNIZING_CROSS_TAB_NOT_SUPPORTED_YET,
        "recognizing cross-tab decision tables is not yet implemented",
    )
