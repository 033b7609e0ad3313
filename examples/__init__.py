"""
Bundled Decision Tables

Example decision tables in text format, stored as .dtb files.

Naming convention of the horizontal examples:

    ┌────────────── table orientation: h - horizontal (rules as rows)
    │ ┌──────────── information item name: absent (0) or present (1)
    │ │┌─────────── output label: absent (0) or present (1)
    │ ││┌────────── allowed values: absent (0) or present (1)
    │ │││┌───────── number of input clauses: 0, 1, 2...
    │ ││││┌──────── number of output clauses: 1, 2...
    │ │││││┌─────── number of annotation clauses: 0, 1, 2...
    h_000010.dtb

Vertical counterparts (rules as columns) use the v_ prefix.
"""

from pathlib import Path
from typing import List

DECISION_TABLES_DIR = Path(__file__).parent / "decision_tables"

H_000010 = "h_000010"
H_000210 = "h_000210"
H_010010 = "h_010010"
H_010210 = "h_010210"
H_011222 = "h_011222"
H_110010 = "h_110010"
V_010210 = "v_010210"
EXAMPLE_0001 = "EXAMPLE_0001"
EXAMPLE_0002 = "EXAMPLE_0002"


def example_names() -> List[str]:
    """Names of all bundled examples, sorted."""
    return sorted(path.stem for path in DECISION_TABLES_DIR.glob("*.dtb"))


def example_path(name: str) -> Path:
    path = DECISION_TABLES_DIR / f"{name}.dtb"
    if not path.exists():
        raise KeyError(f"Unknown example: {name}")
    return path


def load_example(name: str) -> str:
    """
    Load the text of a bundled example.

    Args:
        name: Example name without extension, e.g. "h_000010"

    Raises:
        KeyError: When no such example is bundled
    """
    return example_path(name).read_text(encoding="utf-8")


__all__ = [
    'DECISION_TABLES_DIR',
    'H_000010',
    'H_000210',
    'H_010010',
    'H_010210',
    'H_011222',
    'H_110010',
    'V_010210',
    'EXAMPLE_0001',
    'EXAMPLE_0002',
    'example_names',
    'example_path',
    'load_example',
]
