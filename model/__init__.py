"""
Decision Table Model

Domain values a recognized decision table is described with.
"""

from .hit_policy import HitPolicy, BuiltinAggregator
from .orientation import DecisionTableOrientation

__all__ = [
    'HitPolicy',
    'BuiltinAggregator',
    'DecisionTableOrientation',
]
