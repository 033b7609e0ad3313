"""
Decision Table Recognizer

Recognizes decision tables drawn with box-drawing characters.

Key Components:
- scan / Canvas: text to classified character grid
- Plane / Region: character grid to logical matrix of cells
- Recognizer: logical matrix to decision table components
"""

from .errors import ErrorKind, RecognizerError
from .canvas import Canvas, scan
from .plane import Plane, Region, extract_regions
from .placement import (
    HitPolicyPlacement,
    HitPolicyPlacementKind,
    RuleNumbersPlacement,
    RuleNumbersPlacementKind,
)
from .config import RecognizerSettings, load_settings
from .recognizer import Recognizer

__all__ = [
    'ErrorKind',
    'RecognizerError',
    'Canvas',
    'scan',
    'Plane',
    'Region',
    'extract_regions',
    'HitPolicyPlacement',
    'HitPolicyPlacementKind',
    'RuleNumbersPlacement',
    'RuleNumbersPlacementKind',
    'RecognizerSettings',
    'load_settings',
    'Recognizer',
]
