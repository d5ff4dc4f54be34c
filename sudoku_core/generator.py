"""Solved-grid generator: a shifted Latin-square base pattern scrambled by
validity-preserving transformations."""

# generator.py
# - base pattern: row 0 is a random permutation of 1..9; every later row is
#   row 0 shifted by 3 inside a band and by 1 across bands
# - scramble: band swaps, stack swaps, row/column swaps inside a band,
#   90 degree rotation, global relabeling of two digits
# - bounded retry: any grid failing the final check is discarded
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .errors import GenerationExhausted
from .types_sudoku import Grid
from .validator import is_valid_solution

log = logging.getLogger(__name__)

TRANSFORMATIONS = (
    "swap_bands",
    "swap_stacks",
    "swap_rows",
    "swap_cols",
    "rotate",
    "relabel",
)


def make_rng(seed: Optional[int | np.random.Generator] = None) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def base_pattern(rng: np.random.Generator) -> np.ndarray:
    first = rng.permutation(np.arange(1, 10))
    shifts = [3 * (r % 3) + r // 3 for r in range(9)]
    return np.array([np.roll(first, -s) for s in shifts], dtype=np.int8)


def _two(rng: np.random.Generator, n: int) -> tuple[int, int]:
    a, b = rng.choice(n, size=2, replace=False)
    return int(a), int(b)


def apply_transformation(board: np.ndarray, name: str, rng: np.random.Generator) -> np.ndarray:
    """Apply one named transformation; returns a new array."""
    out = board.copy()
    if name == "swap_bands":
        a, b = _two(rng, 3)
        out[3 * a:3 * a + 3], out[3 * b:3 * b + 3] = board[3 * b:3 * b + 3], board[3 * a:3 * a + 3]
    elif name == "swap_stacks":
        a, b = _two(rng, 3)
        out[:, 3 * a:3 * a + 3], out[:, 3 * b:3 * b + 3] = board[:, 3 * b:3 * b + 3], board[:, 3 * a:3 * a + 3]
    elif name == "swap_rows":
        band = int(rng.integers(3))
        a, b = (3 * band + i for i in _two(rng, 3))
        out[[a, b]] = board[[b, a]]
    elif name == "swap_cols":
        stack = int(rng.integers(3))
        a, b = (3 * stack + i for i in _two(rng, 3))
        out[:, [a, b]] = board[:, [b, a]]
    elif name == "rotate":
        out = np.rot90(board).copy()
    elif name == "relabel":
        a, b = (d + 1 for d in _two(rng, 9))
        out[board == a] = b
        out[board == b] = a
    else:
        raise ValueError(f"unknown transformation {name!r}")
    return out


def scramble(board: np.ndarray, rng: np.random.Generator, steps: int = 100) -> np.ndarray:
    for name in rng.choice(TRANSFORMATIONS, size=steps):
        board = apply_transformation(board, str(name), rng)
    return board


def generate_solution(
    rng: Optional[np.random.Generator] = None,
    transformations: int = 100,
    max_attempts: int = 50,
) -> Grid:
    """Return a complete valid grid as rows of ints.

    Raises GenerationExhausted if `max_attempts` candidates in a row fail the
    final validity check.
    """
    rng = make_rng(rng)
    for attempt in range(1, max_attempts + 1):
        board = scramble(base_pattern(rng), rng, transformations)
        grid = board.tolist()
        if is_valid_solution(grid):
            return grid
        log.warning("generated grid failed validation (attempt %d/%d)", attempt, max_attempts)
    raise GenerationExhausted("solution generator", max_attempts)
