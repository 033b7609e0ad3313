"""
Tests for decision table recognition.

Every bundled example is recognized and checked field by field; the
negative cases check the reported error kind.

Run with: pytest tests/ -v
"""

import pytest
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from examples import (
    H_000010,
    H_000210,
    H_010010,
    H_010210,
    H_011222,
    H_110010,
    V_010210,
    EXAMPLE_0001,
    EXAMPLE_0002,
    example_names,
    load_example,
)
from model import DecisionTableOrientation, HitPolicy
from recognizer import ErrorKind, Recognizer, RecognizerError, RecognizerSettings


HIT_POLICY_BOTTOM_LEFT = """\
┌──────────┬───────╥──────┐
│ Customer │ Order ║ Disc │
╞══════════╪═══════╬══════╡
│ Business │  <10  ║ 0.10 │
├──────────┼───────╫──────┤
│    U     │   -   ║ 0.05 │
└──────────┴───────╨──────┘
"""

NO_OUTPUT_COLUMNS = """\
┌───┬──────────┬───────┐
│ U │ Customer │ Order │
╞═══╪══════════╪═══════╡
│ 1 │ Business │  <10  │
└───┴──────────┴───────┘
"""

RULE_NUMBER_GAP = """\
┌───┬──────────┬───────╥──────┐
│ U │ Customer │ Order ║ Disc │
╞═══╪══════════╪═══════╬══════╡
│ 1 │ Business │  <10  ║ 0.10 │
├───┼──────────┼───────╫──────┤
│ 2 │ Business │ >=10  ║ 0.15 │
├───┼──────────┼───────╫──────┤
│ 4 │ Private  │   -   ║ 0.05 │
└───┴──────────┴───────╨──────┘
"""

CROSSTAB = """\
┌──────────┬─────────────────────┐
│          │     Customer        │
│          ├──────────┬──────────┤
│          │ Business │ Private  │
├──────────┼──────────┼──────────┤
│  <10     │   0.10   │   0.05   │
├──────────┼──────────┼──────────┤
│  >=10    │   0.15   │   0.05   │
└──────────┴──────────┴──────────┘
"""

MISSING_RULE_NUMBERS = """\
┌───┬──────────┬───────╥──────┐
│ U │ Customer │ Order ║ Disc │
╞═══╪══════════╪═══════╬══════╡
│ a │ Business │  <10  ║ 0.10 │
└───┴──────────┴───────╨──────┘
"""

SINGLE_OUTPUT_WITH_VALUES = """\
┌───┬──────────╥──────────┐
│ U │ Customer ║ Discount │
│   ├──────────╫──────────┤
│   │ B,P      ║ 0.1,0.2  │
╞═══╪══════════╬══════════╡
│ 1 │ B        ║   0.1    │
└───┴──────────╨──────────┘
"""

UNMERGED_HIT_POLICY = """\
┌───┬──────────╥──────────┐
│ U │ Customer ║ Discount │
├───┼──────────╫──────────┤
│   │ B,P      ║ 0.1,0.2  │
╞═══╪══════════╬══════════╡
│ 1 │ B        ║   0.1    │
└───┴──────────╨──────────┘
"""

VERTICAL_WITH_VALUES = """\
┌──────────┬──────────╥──────────┬──────────┐
│ Customer │ B,P      ║ B        │ P        │
├──────────┼──────────╫──────────┼──────────┤
│ Order    │ <10,>=10 ║   <10    │   >=10   │
╞══════════╪══════════╬══════════╪══════════╡
│ Discount │ 0.1,0.2  ║   0.1    │   0.2    │
├──────────┼──────────╫──────────┼──────────┤
│    U     │          ║    1     │    2     │
└──────────┴──────────╨──────────┴──────────┘
"""

VERTICAL_SINGLE_INPUT_WITH_VALUES = """\
┌──────────┬──────────╥──────────┬──────────┐
│ Customer │ B,P      ║ B        │ P        │
╞══════════╪══════════╬══════════╪══════════╡
│ Discount │ 0.1,0.2  ║   0.1    │   0.2    │
├──────────┴──────────╫──────────┼──────────┤
│          U          ║    1     │    2     │
└─────────────────────╨──────────┴──────────┘
"""

UNKNOWN_BOTTOM_LEFT_CODE = """\
┌──────────╥──────────┬──────────┐
│ Customer ║ Business │ Private  │
╞══════════╬══════════╪══════════╡
│ Discount ║   0.10   │   0.05   │
├──────────╫──────────┼──────────┤
│    X     ║    1     │    2     │
└──────────╨──────────┴──────────┘
"""

LETTERS_AS_RULE_NUMBERS = """\
┌──────────╥──────────┬──────────┐
│ Customer ║ Business │ Private  │
╞══════════╬══════════╪══════════╡
│ Discount ║   0.10   │   0.05   │
├──────────╫──────────┼──────────┤
│    U     ║    a     │    b     │
└──────────╨──────────┴──────────┘
"""

HIT_POLICY_IN_BOTH_CORNERS = """\
┌─────╥──────┬──────┐
│  A  ║ <10  │ >=10 │
╞═════╬══════╪══════╡
│  D  ║ 0.1  │ 0.2  │
├─────╫──────┼──────┤
│  U  ║  1   │  2   │
└─────╨──────┴──────┘
"""

RULE_NUMBERS_WITHOUT_HIT_POLICY = """\
┌──────────┬──────┐
│ Customer │ Disc │
├──────────┼──────┤
│ 1        │ 0.10 │
├──────────┼──────┤
│ 2        │ 0.05 │
└──────────┴──────┘
"""

INPUT_EXPRESSION_OVER_TWO_ROWS = """\
┌───┬──────────╥──────────┐
│ U │ Customer ║ Offer    │
│   ├──────────╫──────────┤
│   │ Type     ║ Discount │
│   │          ╟──────────┤
│   │          ║ 0.1,0.2  │
╞═══╪══════════╬══════════╡
│ 1 │ B        ║   0.1    │
└───┴──────────╨──────────┘
"""

OUTPUT_VALUES_WITHOUT_INPUT_VALUES = """\
┌───┬──────────╥──────────┐
│ U │ Customer ║ Discount │
│   │          ╟──────────┤
│   │          ║ 0.1,0.2  │
╞═══╪══════════╬══════════╡
│ 1 │ B        ║   0.1    │
└───┴──────────╨──────────┘
"""

FOUR_HEADER_ROWS = """\
┌───┬──────────╥──────┐
│ U │ A        ║ Disc │
│   ├──────────╢      │
│   │ B        ║      │
│   ├──────────╢      │
│   │ C        ║      │
│   ├──────────╢      │
│   │ D        ║      │
╞═══╪══════════╬══════╡
│ 1 │ x        ║ 0.10 │
└───┴──────────╨──────┘
"""


class TestHorizontalExamples:
    """Field by field checks of the horizontal examples."""

    def test_h_000010(self):
        r = Recognizer.recognize(load_example(H_000010))
        assert r.information_item_name is None
        assert r.orientation is DecisionTableOrientation.RULE_AS_ROW
        assert r.hit_policy is HitPolicy.UNIQUE
        assert r.input_clause_count == 0
        assert r.input_expressions == []
        assert r.input_entries == [[], []]
        assert r.output_clause_count == 1
        assert r.output_label is None
        assert r.output_entries == [["0.15"], ["0.05"]]
        assert r.annotation_clause_count == 0
        assert r.annotation_entries == [[], []]
        assert r.rule_count == 2

    def test_h_010010(self):
        r = Recognizer.recognize(load_example(H_010010))
        assert r.input_clause_count == 0
        assert r.output_label == "Discount"
        assert r.output_components == []
        assert r.output_values == []
        assert r.output_entries == [["0.15"], ["0.05"]]

    def test_h_110010(self):
        r = Recognizer.recognize(load_example(H_110010))
        assert r.information_item_name == "Customer discount"
        assert r.output_label == "Discount"
        assert r.rule_count == 2

    def test_h_000210(self):
        r = Recognizer.recognize(load_example(H_000210))
        assert r.input_clause_count == 2
        assert r.input_expressions == ["Customer", "Order"]
        assert r.input_values == []
        assert r.input_entries == [
            ["Business", "<10"],
            ["Business", ">=10"],
            ["Private", "-"],
        ]
        assert r.output_clause_count == 1
        assert r.output_label is None
        assert r.output_entries == [["0.10"], ["0.15"], ["0.05"]]
        assert r.rule_count == 3

    def test_h_010210(self):
        r = Recognizer.recognize(load_example(H_010210))
        assert r.input_expressions == ["Customer", "Order"]
        assert r.output_label == "Discount"
        assert r.output_entries == [["0.10"], ["0.15"], ["0.05"]]

    def test_h_011222(self):
        r = Recognizer.recognize(load_example(H_011222))
        assert r.hit_policy_placement.is_top_left
        assert r.rule_numbers_placement.is_left_below
        assert r.input_clause_count == 2
        assert r.input_expressions == ["Customer type", "Order size"]
        assert r.input_values == ['"Business","Private"', "<10,>=10"]
        assert r.input_entries == [
            ['"Business"', "<10"],
            ['"Business"', ">=10"],
            ['"Private"', "-"],
        ]
        assert r.output_clause_count == 2
        assert r.output_label == "Order options"
        assert r.output_components == ["Discount", "Priority"]
        assert r.output_values == ["0.10,0.15,0.05", '"Normal","High","Low"']
        assert r.output_entries == [
            ["0.10", '"Normal"'],
            ["0.15", '"High"'],
            ["0.05", '"Low"'],
        ]
        assert r.annotation_clause_count == 2
        assert r.annotations == ["Description", "Reference"]
        assert r.annotation_entries == [
            ["Small order", "Ref 1"],
            ["Large order", "Ref 2"],
            ["All orders", "Ref 3"],
        ]
        assert r.rule_count == 3

    def test_single_output_with_values(self):
        r = Recognizer.recognize(SINGLE_OUTPUT_WITH_VALUES)
        assert r.input_expressions == ["Customer"]
        assert r.input_values == ["B,P"]
        assert r.output_label == "Discount"
        assert r.output_values == ["0.1,0.2"]
        assert r.output_entries == [["0.1"]]
        assert r.rule_count == 1

    def test_unmerged_hit_policy_cell(self):
        # Blank cell beside the allowed values row, below the hit policy
        r = Recognizer.recognize(UNMERGED_HIT_POLICY)
        assert r.orientation is DecisionTableOrientation.RULE_AS_ROW
        assert r.hit_policy is HitPolicy.UNIQUE
        assert r.input_expressions == ["Customer"]
        assert r.input_values == ["B,P"]
        assert r.input_entries == [["B"]]
        assert r.output_label == "Discount"
        assert r.output_values == ["0.1,0.2"]
        assert r.output_entries == [["0.1"]]
        assert r.rule_count == 1

    def test_example_0001(self):
        r = Recognizer.recognize(load_example(EXAMPLE_0001))
        assert r.orientation is DecisionTableOrientation.RULE_AS_ROW
        assert r.input_expressions == ["Customer", "Order"]
        assert r.rule_count == 3


class TestVerticalExamples:
    """Vertical tables are pivoted into horizontal ones."""

    def test_v_010210(self):
        r = Recognizer.recognize(load_example(V_010210))
        assert r.orientation is DecisionTableOrientation.RULE_AS_COLUMN
        assert r.hit_policy_placement.is_bottom_left
        assert r.rule_numbers_placement.is_right_after
        assert r.input_expressions == ["Customer", "Order"]
        assert r.output_label == "Discount"
        assert r.rule_count == 3

    def test_pivot_matches_horizontal(self):
        vertical = Recognizer.recognize(load_example(V_010210)).to_dict()
        horizontal = Recognizer.recognize(load_example(H_010210)).to_dict()
        for key in ('orientation', 'hit_policy_placement', 'rule_numbers_placement'):
            vertical.pop(key)
            horizontal.pop(key)
        assert vertical == horizontal

    def test_example_0002(self):
        r = Recognizer.recognize(load_example(EXAMPLE_0002))
        assert r.orientation is DecisionTableOrientation.RULE_AS_COLUMN
        assert r.hit_policy is HitPolicy.UNIQUE
        assert r.input_expressions == ["Applicant age", "Medical history"]
        assert r.input_entries == [
            ["<25", "good"],
            ["<25", "bad"],
            ["[25..60]", "-"],
            [">60", "good"],
            [">60", "bad"],
        ]
        assert r.output_label is None
        assert r.output_components == ["Applicant risk rating", "Special Discount"]
        assert r.output_entries == [
            ["Low", "10"],
            ["Medium", "7"],
            ["Medium", "6"],
            ["Medium", "4"],
            ["High", "0"],
        ]
        assert r.annotation_clause_count == 0
        assert r.rule_count == 5

    def test_allowed_values_column(self):
        r = Recognizer.recognize(VERTICAL_WITH_VALUES)
        assert r.orientation is DecisionTableOrientation.RULE_AS_COLUMN
        assert r.rule_numbers_placement.is_right_after
        assert r.input_expressions == ["Customer", "Order"]
        assert r.input_values == ["B,P", "<10,>=10"]
        assert r.input_entries == [["B", "<10"], ["P", ">=10"]]
        assert r.output_label == "Discount"
        assert r.output_values == ["0.1,0.2"]
        assert r.output_entries == [["0.1"], ["0.2"]]
        assert r.rule_count == 2

    def test_single_input_with_allowed_values(self):
        # The header line crossing under the first label does not make it horizontal
        r = Recognizer.recognize(VERTICAL_SINGLE_INPUT_WITH_VALUES)
        assert r.orientation is DecisionTableOrientation.RULE_AS_COLUMN
        assert r.hit_policy is HitPolicy.UNIQUE
        assert r.input_expressions == ["Customer"]
        assert r.input_values == ["B,P"]
        assert r.input_entries == [["B"], ["P"]]
        assert r.output_label == "Discount"
        assert r.output_values == ["0.1,0.2"]
        assert r.output_entries == [["0.1"], ["0.2"]]
        assert r.rule_count == 2


class TestRecognizerProperties:
    """Properties holding for all bundled examples."""

    def setup_method(self):
        self.names = example_names()

    def test_all_examples_bundled(self):
        assert self.names == [
            "EXAMPLE_0001", "EXAMPLE_0002",
            "h_000010", "h_000210", "h_010010", "h_010210", "h_011222", "h_110010",
            "v_010210",
        ]

    def test_orientation_matches_placement(self):
        for name in self.names:
            r = Recognizer.recognize(load_example(name))
            if r.orientation is DecisionTableOrientation.RULE_AS_ROW:
                assert r.hit_policy_placement.is_top_left, name
            else:
                assert r.orientation is DecisionTableOrientation.RULE_AS_COLUMN, name
                assert r.hit_policy_placement.is_bottom_left, name

    def test_rule_count_consistency(self):
        for name in self.names:
            r = Recognizer.recognize(load_example(name))
            assert len(r.input_entries) == r.rule_count, name
            assert len(r.output_entries) == r.rule_count, name
            assert len(r.annotation_entries) == r.rule_count, name

    def test_recognition_is_repeatable(self):
        for name in self.names:
            text = load_example(name)
            assert Recognizer.recognize(text).to_dict() == Recognizer.recognize(text).to_dict()

    def test_to_dict(self):
        data = Recognizer.recognize(load_example(H_000210)).to_dict()
        assert data['orientation'] == "RULE_AS_ROW"
        assert data['hit_policy'] == "U"
        assert data['hit_policy_placement'] == {'placement': "TOP_LEFT", 'hit_policy': "U"}
        assert data['rule_numbers_placement'] == {'placement': "LEFT_BELOW", 'rule_count': 3}


class TestRecognizerErrors:
    """Malformed tables are rejected with a specific error."""

    def recognize_error(self, text: str) -> RecognizerError:
        with pytest.raises(RecognizerError) as exc_info:
            Recognizer.recognize(text)
        return exc_info.value

    def test_ragged_row(self):
        lines = load_example(H_000210).splitlines()
        lines[3] = lines[3][:-2] + "│"
        error = self.recognize_error("\n".join(lines))
        assert error.kind is ErrorKind.CANVAS_RECTANGLE_NOT_CLOSED

    def test_hit_policy_bottom_left_in_horizontal_table(self):
        error = self.recognize_error(HIT_POLICY_BOTTOM_LEFT)
        assert error.kind is ErrorKind.EXPECTED_TOP_LEFT_HIT_POLICY_PLACEMENT

    def test_no_output_clause(self):
        error = self.recognize_error(NO_OUTPUT_COLUMNS)
        assert error.kind is ErrorKind.NO_OUTPUT_CLAUSE
        assert str(error) == "RecognizerError: no output clause"

    def test_rule_number_gap(self):
        error = self.recognize_error(RULE_NUMBER_GAP)
        assert error.kind is ErrorKind.PLANE_INVALID_RULE_NUMBER
        assert error.payload == (4,)

    def test_crosstab(self):
        error = self.recognize_error(CROSSTAB)
        assert error.kind is ErrorKind.RECOGNIZING_CROSS_TAB_NOT_SUPPORTED_YET

    def test_missing_rule_numbers(self):
        error = self.recognize_error(MISSING_RULE_NUMBERS)
        assert error.kind is ErrorKind.EXPECTED_LEFT_BELOW_RULE_NUMBERS_PLACEMENT

    def test_too_many_header_rows(self):
        error = self.recognize_error(FOUR_HEADER_ROWS)
        assert error.kind is ErrorKind.TOO_MANY_ROWS_IN_INPUT_CLAUSE

    def test_unknown_hit_policy_in_vertical_table(self):
        error = self.recognize_error(UNKNOWN_BOTTOM_LEFT_CODE)
        assert error.kind is ErrorKind.EXPECTED_BOTTOM_LEFT_HIT_POLICY_PLACEMENT

    def test_letters_as_rule_numbers_in_vertical_table(self):
        error = self.recognize_error(LETTERS_AS_RULE_NUMBERS)
        assert error.kind is ErrorKind.EXPECTED_RIGHT_AFTER_RULE_NUMBERS_PLACEMENT

    def test_hit_policy_in_both_corners(self):
        error = self.recognize_error(HIT_POLICY_IN_BOTH_CORNERS)
        assert error.kind is ErrorKind.EXPECTED_TOP_LEFT_HIT_POLICY_PLACEMENT

    def test_rule_numbers_without_hit_policy(self):
        error = self.recognize_error(RULE_NUMBERS_WITHOUT_HIT_POLICY)
        assert error.kind is ErrorKind.EXPECTED_NO_RULE_NUMBERS_PRESENT

    def test_input_expression_over_two_rows(self):
        error = self.recognize_error(INPUT_EXPRESSION_OVER_TWO_ROWS)
        assert error.kind is ErrorKind.INVALID_INPUT_EXPRESSIONS

    def test_output_values_without_input_values(self):
        error = self.recognize_error(OUTPUT_VALUES_WITHOUT_INPUT_VALUES)
        assert error.kind is ErrorKind.PLANE_INVALID_OUTPUT_CLAUSE


class TestTrace:
    """Tests for the diagnostic dump."""

    def test_trace_disabled(self, capsys):
        Recognizer.recognize(load_example(H_000210))
        assert capsys.readouterr().out == ""

    def test_trace_enabled(self, capsys):
        Recognizer.recognize(load_example(H_000210), RecognizerSettings(trace=True))
        output = capsys.readouterr().out
        assert ">> input expressions:" in output
        assert "|Customer|Order|" in output
        assert "|Private|-|" in output
