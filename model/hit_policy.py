"""
Hit Policies

A hit policy governs how the results of several matching rules combine
into the decision table result. In a drawn decision table the policy is
written as a one or two character code in a corner cell.

Codes:
- U: unique          - A: any           - P: priority
- F: first           - O: output order  - R: rule order
- C: collect (list), C+ sum, C# count, C< min, C> max
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class BuiltinAggregator(Enum):
    """Aggregation applied to the outputs of a COLLECT hit policy."""
    LIST = auto()
    COUNT = auto()
    SUM = auto()
    MIN = auto()
    MAX = auto()


class HitPolicy(Enum):
    """Hit policy, valued by its code in the drawn table."""

    UNIQUE = 'U'
    ANY = 'A'
    PRIORITY = 'P'
    FIRST = 'F'
    COLLECT = 'C'
    COLLECT_SUM = 'C+'
    COLLECT_COUNT = 'C#'
    COLLECT_MIN = 'C<'
    COLLECT_MAX = 'C>'
    OUTPUT_ORDER = 'O'
    RULE_ORDER = 'R'

    @property
    def code(self) -> str:
        return self.value

    @property
    def is_collect(self) -> bool:
        return self.aggregator is not None

    @property
    def aggregator(self) -> Optional[BuiltinAggregator]:
        """Aggregator for COLLECT policies, None for the others."""
        aggregators = {
            HitPolicy.COLLECT: BuiltinAggregator.LIST,
            HitPolicy.COLLECT_SUM: BuiltinAggregator.SUM,
            HitPolicy.COLLECT_COUNT: BuiltinAggregator.COUNT,
            HitPolicy.COLLECT_MIN: BuiltinAggregator.MIN,
            HitPolicy.COLLECT_MAX: BuiltinAggregator.MAX,
        }
        return aggregators.get(self)

    @classmethod
    def from_code(cls, text: Optional[str]) -> Optional['HitPolicy']:
        """
        Decode a hit policy code.

        Args:
            text: Cell text, surrounding whitespace is ignored

        Returns:
            Matching HitPolicy or None when the text is not a known code
        """
        if not text:
            return None
        code = text.strip()
        for policy in cls:
            if policy.value == code:
                return policy
        return None

    def __str__(self) -> str:
        return self.value
