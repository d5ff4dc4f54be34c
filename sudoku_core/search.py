"""Exhaustive backtracking search: solve a grid or count its solutions up to a cap.

Both modes share one iterative depth-first core. Each step picks the empty
cell with the fewest legal digits (minimum remaining values) and tries those
digits in ascending order, undoing the placement when a branch dies. Digit
sets are 9-bit masks (bit d set = digit d used/allowed).
"""

from __future__ import annotations

import logging
from typing import Optional

from .types_sudoku import Grid

log = logging.getLogger(__name__)

FULL_MASK = 0b1111111110  # bits 1..9


def _box(r: int, c: int) -> int:
    return 3 * (r // 3) + c // 3


def _search(grid: Grid, limit: int) -> tuple[int, Optional[Grid]]:
    """Return (solutions found, first solution), stopping once `limit` are found."""
    work = [row[:] for row in grid]
    rows = [0] * 9
    cols = [0] * 9
    boxes = [0] * 9
    open_cells = []
    for r in range(9):
        for c in range(9):
            v = work[r][c]
            if v is None:
                open_cells.append((r, c))
                continue
            bit = 1 << v
            b = _box(r, c)
            if (rows[r] | cols[c] | boxes[b]) & bit:
                # givens already clash
                return 0, None
            rows[r] |= bit
            cols[c] |= bit
            boxes[b] |= bit

    count = 0
    first: Optional[Grid] = None
    # frames: [row, col, untried digit mask, digit bit currently placed]
    stack: list[list[int]] = []
    while True:
        if not open_cells:
            count += 1
            if first is None:
                first = [row[:] for row in work]
            if count >= limit:
                return count, first
        else:
            best_i, best_mask, best_n = -1, 0, 10
            for i, (r, c) in enumerate(open_cells):
                mask = FULL_MASK & ~(rows[r] | cols[c] | boxes[_box(r, c)])
                n = bin(mask).count("1")
                if n < best_n:
                    best_i, best_mask, best_n = i, mask, n
                    if n <= 1:
                        break
            if best_n > 0:
                r, c = open_cells[best_i]
                open_cells[best_i] = open_cells[-1]
                open_cells.pop()
                stack.append([r, c, best_mask, 0])

        # advance the deepest frame to its next digit, unwinding exhausted frames
        while stack:
            frame = stack[-1]
            r, c, mask, placed = frame
            b = _box(r, c)
            if placed:
                rows[r] ^= placed
                cols[c] ^= placed
                boxes[b] ^= placed
                work[r][c] = None
            if mask:
                bit = mask & -mask
                frame[2] = mask ^ bit
                frame[3] = bit
                rows[r] |= bit
                cols[c] |= bit
                boxes[b] |= bit
                work[r][c] = bit.bit_length() - 1
                break
            stack.pop()
            open_cells.append((r, c))
        else:
            return count, first


def count_solutions(grid: Grid, limit: int = 2) -> int:
    """Count completions of `grid`, stopping early once `limit` are found."""
    if limit < 1:
        raise ValueError("limit must be >= 1")
    count, _ = _search(grid, limit)
    return count


def solve(grid: Grid) -> Optional[Grid]:
    """Return one completion of `grid`, or None when it is unsatisfiable."""
    _, solution = _search(grid, 1)
    if solution is None:
        log.debug("search found no completion")
    return solution


def has_unique_solution(grid: Grid) -> bool:
    return count_solutions(grid, limit=2) == 1
