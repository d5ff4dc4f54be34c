"""Human-style solving without guessing: the technique ladder, difficulty rating and next-move hints."""

# propagation.py
# The ladder runs the allowed techniques cheapest first. As soon as one
# technique makes progress its moves are applied and the ladder restarts from
# the top; it stops when the grid is full, when no technique makes progress,
# or when the candidates contradict each other.
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .difficulty import ADVANCED, TECHNIQUES_BY_DIFFICULTY, Difficulty
from .solver_core import (
    CLAIMING,
    HIDDEN_SINGLE,
    NAKED_PAIR,
    NAKED_SINGLE,
    PEERS,
    POINTING,
    UNITS,
    X_WING,
    clone_grid,
    compute_candidates,
    find_hidden_singles,
    find_locked_candidates_claiming,
    find_locked_candidates_pointing,
    find_naked_pairs,
    find_naked_singles,
    find_x_wing,
)
from .types_sudoku import Candidates, Grid, Move

log = logging.getLogger(__name__)

Finder = Callable[[Grid, Candidates], list[Move]]

FINDERS: dict[str, Finder] = {
    NAKED_SINGLE: find_naked_singles,
    HIDDEN_SINGLE: find_hidden_singles,
    NAKED_PAIR: find_naked_pairs,
    POINTING: find_locked_candidates_pointing,
    CLAIMING: find_locked_candidates_claiming,
    X_WING: find_x_wing,
}


@dataclass
class PropagationResult:
    grid: Grid
    candidates: Candidates
    solved: bool = False
    contradiction: bool = False
    moves: list[Move] = field(default_factory=list)
    techniques_used: set[str] = field(default_factory=set)


def _ordered(techniques: Iterable[str]) -> list[str]:
    wanted = set(techniques)
    unknown = wanted - set(FINDERS)
    if unknown:
        raise ValueError(f"unknown techniques: {sorted(unknown)}")
    return [name for name in ADVANCED if name in wanted]


def _place(grid: Grid, candidates: Candidates, move: Move) -> bool:
    cell = move["cell"]
    d = move["digit"]
    opts = candidates.get(cell)
    if opts is None:
        # already filled by an earlier move of the same batch
        r, c = cell
        return grid[r][c] == d
    if d not in opts:
        return False
    r, c = cell
    grid[r][c] = d
    del candidates[cell]
    for p in PEERS[cell]:
        peer_opts = candidates.get(p)
        if peer_opts is not None:
            peer_opts.discard(d)
    return True


def _eliminate(candidates: Candidates, move: Move) -> int:
    d = move["digit"]
    removed = 0
    for cell in move["eliminate"]:
        opts = candidates.get(cell)
        if opts is not None and d in opts:
            opts.discard(d)
            removed += 1
    return removed


def apply_action(grid: Grid, candidates: Candidates, move: Move) -> tuple[int, bool]:
    """Apply one move in place; returns (changes made, still consistent)."""
    if move.get("type", "placement") == "placement":
        filled_before = move["cell"] not in candidates
        ok = _place(grid, candidates, move)
        return (0 if filled_before or not ok else 1), ok
    return _eliminate(candidates, move), True


def has_contradiction(grid: Grid, candidates: Candidates) -> bool:
    """A cell with no candidates, or a digit with nowhere to go in some unit."""
    if any(not opts for opts in candidates.values()):
        return True
    for _, cells in UNITS:
        placed = {grid[r][c] for r, c in cells} - {None}
        if len(placed) != sum(1 for r, c in cells if grid[r][c] is not None):
            return True
        possible = set(placed)
        for cell in cells:
            possible |= candidates.get(cell, set())
        if len(possible) != 9:
            return True
    return False


def propagate(
    grid: Grid,
    techniques: Iterable[str] = ADVANCED,
    candidates: Optional[Candidates] = None,
    record: bool = False,
) -> PropagationResult:
    """Run the technique ladder on a copy of `grid` until it is solved or stuck."""
    order = _ordered(techniques)
    cur = clone_grid(grid)
    cands = compute_candidates(cur) if candidates is None else {k: set(v) for k, v in candidates.items()}
    result = PropagationResult(grid=cur, candidates=cands)
    if has_contradiction(cur, cands):
        result.contradiction = True
        return result

    while cands:
        progressed = False
        for name in order:
            moves = FINDERS[name](cur, cands)
            changed = 0
            for move in moves:
                n, ok = apply_action(cur, cands, move)
                if not ok:
                    result.contradiction = True
                    return result
                if n:
                    changed += n
                    if record:
                        result.moves.append(move)
            if changed:
                result.techniques_used.add(name)
                progressed = True
                break
        if not progressed:
            break
        if has_contradiction(cur, cands):
            result.contradiction = True
            return result

    result.solved = not cands
    return result


def solves_logically(grid: Grid, difficulty: Difficulty | str) -> bool:
    techniques = TECHNIQUES_BY_DIFFICULTY[Difficulty.parse(difficulty)]
    return propagate(grid, techniques).solved


def rate_difficulty(grid: Grid) -> Optional[Difficulty]:
    """Easiest tier whose technique set solves `grid`; None if none does.

    Hard and Expert share a technique set, so logic alone never rates Expert.
    """
    result = propagate(grid, ADVANCED)
    if not result.solved:
        return None
    for difficulty in (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD):
        if result.techniques_used <= set(TECHNIQUES_BY_DIFFICULTY[difficulty]):
            return difficulty
    return Difficulty.HARD


def next_move(
    current: Grid,
    techniques: Iterable[str] = ADVANCED,
    candidates: Optional[Candidates] = None,
) -> Optional[Move]:
    """First useful move the ladder would make from `current`, or None.

    With pencil-mark style `candidates` supplied, eliminations already made
    there are respected; otherwise candidates are computed from the grid.
    """
    cands = compute_candidates(current) if candidates is None else {k: set(v) for k, v in candidates.items()}
    if has_contradiction(current, cands):
        return None
    for name in _ordered(techniques):
        for move in FINDERS[name](current, cands):
            if move["type"] == "placement" or any(move["digit"] in cands[cell] for cell in move["eliminate"]):
                return move
    return None
