# types_sudoku.py
from __future__ import annotations

from typing import Optional, TypedDict

Digit = int
"""A Sudoku digit, 1..9."""

Cell = tuple[int, int]
"""(row, col), both 0-based."""

Grid = list[list[Optional[int]]]
"""A 9x9 Sudoku grid as rows of optional digits (None = empty)."""

Candidates = dict[Cell, set[int]]
"""Map from empty cell to the digits still possible there."""

PencilMarks = dict[str, list[int]]
"""Serialized pencil marks: cell key (e.g., 'r1c1') to sorted digits."""


class Move(TypedDict, total=False):
    """A single human-style solving action found by a technique finder."""

    technique: str  # e.g., 'naked_single', 'hidden_single', 'x_wing'
    type: str  # 'placement' or 'elimination'
    digit: int  # the digit being placed or eliminated
    cell: Cell  # for placements, target cell
    eliminate: list[Cell]  # for eliminations, cells to clear that digit from
    unit: str  # unit the deduction was made in, e.g. 'r4', 'c7', 'b2'
    explanation: str  # human-friendly explanation


class ConflictIssue(TypedDict):
    """Digits repeated inside one unit."""

    type: str  # always 'duplicate'
    unit: str
    digits: list[int]
    cells: list[str]
