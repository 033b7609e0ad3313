"""
Placement of Decision Table Metadata

Where the hit policy and the rule numbers were found in a drawn table.
Their placement decides the table orientation:

- horizontal: hit policy top-left, rule numbers in the column below it
- vertical:   hit policy bottom-left, rule numbers in the row after it
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional

from model import HitPolicy


class HitPolicyPlacementKind(Enum):
    NOT_PRESENT = auto()
    TOP_LEFT = auto()
    BOTTOM_LEFT = auto()


class RuleNumbersPlacementKind(Enum):
    NOT_PRESENT = auto()
    LEFT_BELOW = auto()
    RIGHT_AFTER = auto()


@dataclass(frozen=True)
class HitPolicyPlacement:
    """Corner holding the hit policy code, with the decoded policy."""
    kind: HitPolicyPlacementKind
    policy: Optional[HitPolicy] = None

    @classmethod
    def not_present(cls) -> 'HitPolicyPlacement':
        return cls(HitPolicyPlacementKind.NOT_PRESENT)

    @classmethod
    def top_left(cls, policy: HitPolicy) -> 'HitPolicyPlacement':
        return cls(HitPolicyPlacementKind.TOP_LEFT, policy)

    @classmethod
    def bottom_left(cls, policy: HitPolicy) -> 'HitPolicyPlacement':
        return cls(HitPolicyPlacementKind.BOTTOM_LEFT, policy)

    @property
    def is_top_left(self) -> bool:
        return self.kind is HitPolicyPlacementKind.TOP_LEFT

    @property
    def is_bottom_left(self) -> bool:
        return self.kind is HitPolicyPlacementKind.BOTTOM_LEFT

    @property
    def is_not_present(self) -> bool:
        return self.kind is HitPolicyPlacementKind.NOT_PRESENT

    def hit_policy(self) -> HitPolicy:
        """Placed hit policy; a table without one defaults to UNIQUE."""
        return self.policy or HitPolicy.UNIQUE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'placement': self.kind.name,
            'hit_policy': self.policy.code if self.policy else None,
        }


@dataclass(frozen=True)
class RuleNumbersPlacement:
    """Position of the rule number cells and how many were found."""
    kind: RuleNumbersPlacementKind
    count: int = 0

    @classmethod
    def not_present(cls) -> 'RuleNumbersPlacement':
        return cls(RuleNumbersPlacementKind.NOT_PRESENT)

    @classmethod
    def left_below(cls, count: int) -> 'RuleNumbersPlacement':
        return cls(RuleNumbersPlacementKind.LEFT_BELOW, count)

    @classmethod
    def right_after(cls, count: int) -> 'RuleNumbersPlacement':
        return cls(RuleNumbersPlacementKind.RIGHT_AFTER, count)

    @property
    def is_left_below(self) -> bool:
        return self.kind is RuleNumbersPlacementKind.LEFT_BELOW

    @property
    def is_right_after(self) -> bool:
        return self.kind is RuleNumbersPlacementKind.RIGHT_AFTER

    @property
    def is_not_present(self) -> bool:
        return self.kind is RuleNumbersPlacementKind.NOT_PRESENT

    def rule_count(self) -> int:
        return self.count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'placement': self.kind.name,
            'rule_count': self.count,
        }
