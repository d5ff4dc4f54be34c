"""Placement legality with a per-grid memo, plus whole-board checks."""

from __future__ import annotations

from typing import Optional

from .solver_core import UNITS, rc_to_key, unit_cells_box, which_box
from .types_sudoku import ConflictIssue, Grid

FULL_SET = frozenset(range(1, 10))


class PlacementValidator:
    """Answers "may `value` go at (row, col)?" for one grid.

    The validator reads the grid it was given by reference, so the owner must
    call `invalidate()` after every change to any cell. When a solution is
    supplied, a value that disagrees with it is rejected before the unit scan.
    """

    def __init__(self, grid: Grid, solution: Optional[Grid] = None):
        self.grid = grid
        self.solution = solution
        self._memo: dict[tuple[int, int, int], bool] = {}

    def invalidate(self):
        self._memo.clear()

    def is_valid(self, row: int, col: int, value: int) -> bool:
        if not (0 <= row < 9 and 0 <= col < 9) or value not in FULL_SET:
            return False
        key = (row, col, value)
        cached = self._memo.get(key)
        if cached is None:
            cached = self._memo[key] = self._check(row, col, value)
        return cached

    def _check(self, row: int, col: int, value: int) -> bool:
        if self.solution is not None and self.solution[row][col] != value:
            return False
        g = self.grid
        for c in range(9):
            if c != col and g[row][c] == value:
                return False
        for r in range(9):
            if r != row and g[r][col] == value:
                return False
        for r, c in unit_cells_box(which_box(row, col)):
            if (r, c) != (row, col) and g[r][c] == value:
                return False
        return True


def is_valid_solution(grid: Grid) -> bool:
    """True when every row, column and box is exactly {1..9}."""
    if len(grid) != 9 or any(len(row) != 9 for row in grid):
        return False
    return all({grid[r][c] for r, c in cells} == FULL_SET for _, cells in UNITS)


def find_conflicts(current: Grid) -> list[ConflictIssue]:
    """Duplicate digits per row, column and box."""
    issues: list[ConflictIssue] = []
    for label, cells in UNITS:
        seen = set()
        dups = set()
        for r, c in cells:
            v = current[r][c]
            if v is None:
                continue
            if v in seen:
                dups.add(v)
            seen.add(v)
        if dups:
            bad = [rc_to_key(r, c) for r, c in cells if current[r][c] in dups]
            issues.append({"type": "duplicate", "unit": label, "digits": sorted(dups), "cells": bad})
    return issues

