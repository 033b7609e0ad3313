"""Decision table orientation."""

from __future__ import annotations

from enum import Enum, auto


class DecisionTableOrientation(Enum):
    """How rules are laid out in a drawn decision table."""

    RULE_AS_ROW = auto()       # Horizontal, one rule per row
    RULE_AS_COLUMN = auto()    # Vertical, one rule per column
    CROSS_TABLE = auto()       # Two-dimensional crosstab

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        names = {
            DecisionTableOrientation.RULE_AS_ROW: "Rule-as-Row",
            DecisionTableOrientation.RULE_AS_COLUMN: "Rule-as-Column",
            DecisionTableOrientation.CROSS_TABLE: "CrossTable",
        }
        return names[self]
