"""Clue removal: turn a solved grid into a puzzle for a difficulty tier."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import GeneratorConfig
from .difficulty import Difficulty, DifficultyProfile
from .errors import GenerationExhausted
from .generator import generate_solution, make_rng
from .propagation import propagate
from .search import has_unique_solution
from .solver_core import clone_grid, count_clues, which_box
from .types_sudoku import Cell, Grid

log = logging.getLogger(__name__)


@dataclass
class CarveResult:
    puzzle: Grid
    solution: Grid
    clues: int
    target: int
    accepted: bool
    rejected_balance: int = 0
    rejected_logic: int = 0
    rejected_unique: int = 0


class _UnitCounts:
    """Clues left per row, column and box."""

    def __init__(self, grid: Grid):
        self.rows = [0] * 9
        self.cols = [0] * 9
        self.boxes = [0] * 9
        for r in range(9):
            for c in range(9):
                if grid[r][c] is not None:
                    self.add(r, c, 1)

    def add(self, r: int, c: int, n: int):
        self.rows[r] += n
        self.cols[c] += n
        self.boxes[which_box(r, c)] += n

    def can_remove(self, r: int, c: int, minimum: int) -> bool:
        return min(self.rows[r], self.cols[c], self.boxes[which_box(r, c)]) > minimum

    def density(self, r: int, c: int) -> int:
        return self.rows[r] + self.cols[c] + self.boxes[which_box(r, c)]


def _pick_densest(cells: list[Cell], counts: _UnitCounts, rng: np.random.Generator) -> Cell:
    # random tie-break among the cells whose units are fullest
    best = max(counts.density(r, c) for r, c in cells)
    top = [cell for cell in cells if counts.density(*cell) == best]
    return top[int(rng.integers(len(top)))]


def carve(
    solution: Grid,
    difficulty: Difficulty | str,
    rng: Optional[np.random.Generator] = None,
    profile: Optional[DifficultyProfile] = None,
) -> CarveResult:
    """Remove clues from `solution` one at a time until the tier's target is hit.

    A removal is kept only if every row/column/box keeps its minimum clue
    count, the technique ladder for the tier still solves the puzzle (when the
    profile requires it), and the puzzle still has exactly one solution.
    """
    difficulty = Difficulty.parse(difficulty)
    rng = make_rng(rng)
    if profile is None:
        profile = GeneratorConfig().profile(difficulty)
    low, high = profile.clue_range
    target = int(rng.integers(low, high + 1))

    puzzle = clone_grid(solution)
    counts = _UnitCounts(puzzle)
    clues = count_clues(puzzle)
    result = CarveResult(puzzle=puzzle, solution=clone_grid(solution), clues=clues, target=target, accepted=False)

    remaining = [(r, c) for r in range(9) for c in range(9) if puzzle[r][c] is not None]
    if profile.ordering == "random":
        remaining = [remaining[i] for i in rng.permutation(len(remaining))]

    while remaining and clues > target:
        if profile.ordering == "density":
            cell = _pick_densest(remaining, counts, rng)
            remaining.remove(cell)
        else:
            cell = remaining.pop()
        r, c = cell

        if not counts.can_remove(r, c, profile.min_clues_per_unit):
            result.rejected_balance += 1
            continue
        value = puzzle[r][c]
        puzzle[r][c] = None
        if profile.require_logic and not propagate(puzzle, profile.techniques).solved:
            puzzle[r][c] = value
            result.rejected_logic += 1
            continue
        if not has_unique_solution(puzzle):
            puzzle[r][c] = value
            result.rejected_unique += 1
            continue
        counts.add(r, c, -1)
        clues -= 1
        log.debug("removed clue at r%dc%d, %d clues left", r + 1, c + 1, clues)

    result.clues = clues
    result.accepted = profile.accepts(clues)
    return result


def generate_puzzle(
    difficulty: Difficulty | str,
    rng: Optional[np.random.Generator | int] = None,
    config: Optional[GeneratorConfig] = None,
) -> CarveResult:
    """Solved grid plus carving, retried with fresh grids until the clue count
    lands in the tier's range.
    """
    difficulty = Difficulty.parse(difficulty)
    config = config or GeneratorConfig()
    rng = make_rng(config.seed if rng is None else rng)
    profile = config.profile(difficulty)
    for attempt in range(1, config.max_generation_attempts + 1):
        solution = generate_solution(
            rng, config.shuffle_transformations, config.max_generation_attempts
        )
        result = carve(solution, difficulty, rng, profile)
        if result.accepted:
            log.info(
                "%s puzzle with %d clues after %d attempt(s)", difficulty.value, result.clues, attempt
            )
            return result
        log.info(
            "%s carve stopped at %d clues, outside %s (attempt %d/%d)",
            difficulty.value,
            result.clues,
            profile.clue_range,
            attempt,
            config.max_generation_attempts,
        )
    log.warning("giving up on %s puzzle after %d attempts", difficulty.value, config.max_generation_attempts)
    raise GenerationExhausted(f"{difficulty.value} puzzle", config.max_generation_attempts)
