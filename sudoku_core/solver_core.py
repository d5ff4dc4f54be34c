"""Core Sudoku utilities used by higher-level techniques: index math, peers, unit iterators, candidate computation and the human-style technique finders."""

# solver_core.py
# Human-style Sudoku utilities:
# - candidate computation
# - naked singles & hidden singles (placements)
# - naked pairs, locked candidates (pointing & claiming), x-wing (eliminations)
# Grid is 9x9 list of lists of optional ints. None = blank. Cells are 0-based.
from __future__ import annotations

from .types_sudoku import Candidates, Cell, Grid, Move

DIGITS = range(1, 10)

NAKED_SINGLE = "naked_single"
HIDDEN_SINGLE = "hidden_single"
NAKED_PAIR = "naked_pair"
POINTING = "locked_candidates_pointing"
CLAIMING = "locked_candidates_claiming"
X_WING = "x_wing"


def in_bounds(r: int, c: int) -> bool:
    return 0 <= r < 9 and 0 <= c < 9


def rc_to_key(r: int, c: int) -> str:
    return f"r{r + 1}c{c + 1}"


def key_to_rc(key: str) -> Cell:
    r = int(key.split("c")[0][1:])
    c = int(key.split("c")[1])
    if not (1 <= r <= 9 and 1 <= c <= 9):
        raise ValueError(f"cell key out of range: {key!r}")
    return (r - 1, c - 1)


def clone_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def empty_grid() -> Grid:
    return [[None] * 9 for _ in range(9)]


def which_box(r: int, c: int) -> int:
    return 3 * (r // 3) + c // 3


def unit_cells_row(r: int) -> list[Cell]:
    return [(r, c) for c in range(9)]


def unit_cells_col(c: int) -> list[Cell]:
    return [(r, c) for r in range(9)]


def unit_cells_box(b: int) -> list[Cell]:
    r0 = 3 * (b // 3)
    c0 = 3 * (b % 3)
    return [(r0 + i, c0 + j) for i in range(3) for j in range(3)]


# (label, cells) for all 27 houses, rows first, then columns, then boxes.
UNITS: list[tuple[str, list[Cell]]] = (
    [(f"r{i + 1}", unit_cells_row(i)) for i in range(9)]
    + [(f"c{i + 1}", unit_cells_col(i)) for i in range(9)]
    + [(f"b{i + 1}", unit_cells_box(i)) for i in range(9)]
)


def _peers_of(r: int, c: int) -> frozenset:
    ps = set(unit_cells_row(r)) | set(unit_cells_col(c)) | set(unit_cells_box(which_box(r, c)))
    ps.discard((r, c))
    return frozenset(ps)


PEERS: dict[Cell, frozenset] = {(r, c): _peers_of(r, c) for r in range(9) for c in range(9)}


def peers(r: int, c: int) -> frozenset:
    """Return the set of peer coordinates for a given cell (same row, column, and 3x3 box)."""
    return PEERS[(r, c)]


def row_values(grid: Grid, r: int) -> set:
    return {v for v in grid[r] if v is not None}


def col_values(grid: Grid, c: int) -> set:
    return {grid[i][c] for i in range(9)} - {None}


def box_values(grid: Grid, r: int, c: int) -> set:
    r0 = 3 * (r // 3)
    c0 = 3 * (c // 3)
    return {grid[r0 + i][c0 + j] for i in range(3) for j in range(3)} - {None}


def count_clues(grid: Grid) -> int:
    return sum(1 for row in grid for v in row if v is not None)


def compute_candidates(grid: Grid) -> Candidates:
    cand = {}
    for r in range(9):
        for c in range(9):
            if grid[r][c] is None:
                used = row_values(grid, r) | col_values(grid, c) | box_values(grid, r, c)
                cand[(r, c)] = {d for d in DIGITS if d not in used}
    return cand


def _positions(candidates: Candidates, cells: list[Cell], d: int) -> list[Cell]:
    return [cell for cell in cells if d in candidates.get(cell, ())]


def _unit_name(label: str) -> str:
    return {"r": "row", "c": "column", "b": "box"}[label[0]] + f" {label[1:]}"


def find_naked_singles(grid: Grid, candidates: Candidates) -> list[Move]:
    moves = []
    for (r, c), opts in candidates.items():
        if len(opts) == 1:
            (d,) = opts
            moves.append(
                {
                    "technique": NAKED_SINGLE,
                    "type": "placement",
                    "cell": (r, c),
                    "digit": d,
                    "unit": f"b{which_box(r, c) + 1}",
                    "explanation": f"Only one candidate fits {rc_to_key(r, c)}.",
                }
            )
    return moves


def find_hidden_singles(grid: Grid, candidates: Candidates) -> list[Move]:
    moves = []
    seen = set()
    for label, cells in UNITS:
        for d in DIGITS:
            locs = _positions(candidates, cells, d)
            if len(locs) != 1 or (locs[0], d) in seen:
                continue
            seen.add((locs[0], d))
            moves.append(
                {
                    "technique": HIDDEN_SINGLE,
                    "type": "placement",
                    "cell": locs[0],
                    "digit": d,
                    "unit": label,
                    "explanation": f"Digit {d} appears in only one cell in {_unit_name(label)}.",
                }
            )
    return moves


def find_naked_pairs(grid: Grid, candidates: Candidates) -> list[Move]:
    """Two cells of a unit holding the same two candidates claim both digits;
    eliminate those digits from the rest of the unit.
    """
    moves = []
    for label, cells in UNITS:
        pairs: dict[frozenset, list[Cell]] = {}
        for cell in cells:
            opts = candidates.get(cell)
            if opts is not None and len(opts) == 2:
                pairs.setdefault(frozenset(opts), []).append(cell)
        for digits, owners in pairs.items():
            if len(owners) != 2:
                continue
            for d in sorted(digits):
                elim = [cell for cell in _positions(candidates, cells, d) if cell not in owners]
                if elim:
                    a, b = (rc_to_key(*cell) for cell in owners)
                    moves.append(
                        {
                            "technique": NAKED_PAIR,
                            "type": "elimination",
                            "digit": d,
                            "eliminate": elim,
                            "unit": label,
                            "explanation": (
                                f"{a} and {b} both hold only {sorted(digits)} in {_unit_name(label)}. "
                                f"Eliminate {d} from the other cells of {_unit_name(label)}."
                            ),
                        }
                    )
    return moves


def find_locked_candidates_pointing(grid: Grid, candidates: Candidates) -> list[Move]:
    """If in a box, a digit's candidates lie in a single row (or column), eliminate that digit
    from the rest of that row (or column) outside the box.
    """
    moves = []
    for b in range(9):
        cells = unit_cells_box(b)
        for d in DIGITS:
            locs = _positions(candidates, cells, d)
            if len(locs) < 2:
                continue
            rows = {r for r, _ in locs}
            cols = {c for _, c in locs}
            # single row inside box
            if len(rows) == 1:
                (r,) = rows
                elim = [cell for cell in _positions(candidates, unit_cells_row(r), d) if cell not in cells]
                if elim:
                    moves.append(
                        {
                            "technique": POINTING,
                            "type": "elimination",
                            "digit": d,
                            "eliminate": elim,
                            "unit": f"b{b + 1}",
                            "explanation": (
                                f"In box {b + 1}, digit {d}'s candidates lie only in row {r + 1}. "
                                f"Eliminate {d} from row {r + 1} outside this box."
                            ),
                        }
                    )
            # single column inside box
            if len(cols) == 1:
                (c,) = cols
                elim = [cell for cell in _positions(candidates, unit_cells_col(c), d) if cell not in cells]
                if elim:
                    moves.append(
                        {
                            "technique": POINTING,
                            "type": "elimination",
                            "digit": d,
                            "eliminate": elim,
                            "unit": f"b{b + 1}",
                            "explanation": (
                                f"In box {b + 1}, digit {d}'s candidates lie only in column {c + 1}. "
                                f"Eliminate {d} from column {c + 1} outside this box."
                            ),
                        }
                    )
    return moves


def find_locked_candidates_claiming(grid: Grid, candidates: Candidates) -> list[Move]:
    """If in a row/column, a digit's candidates are confined to a single box, eliminate that digit
    from other cells in that box (box-line reduction).
    """
    moves = []
    for label, cells in UNITS[:18]:
        for d in DIGITS:
            locs = _positions(candidates, cells, d)
            if len(locs) < 2:
                continue
            boxes = {which_box(r, c) for r, c in locs}
            if len(boxes) != 1:
                continue
            (b,) = boxes
            elim = [cell for cell in _positions(candidates, unit_cells_box(b), d) if cell not in cells]
            if elim:
                moves.append(
                    {
                        "technique": CLAIMING,
                        "type": "elimination",
                        "digit": d,
                        "eliminate": elim,
                        "unit": label,
                        "explanation": (
                            f"In {_unit_name(label)}, digit {d}'s candidates are confined to box {b + 1}. "
                            f"Eliminate {d} from other cells in box {b + 1}."
                        ),
                    }
                )
    return moves


def _x_wing_lines(candidates: Candidates, d: int, by_row: bool) -> list[Move]:
    moves = []
    # line index -> the two cross positions holding d
    spots: dict[int, tuple[int, int]] = {}
    for i in range(9):
        cells = unit_cells_row(i) if by_row else unit_cells_col(i)
        locs = _positions(candidates, cells, d)
        if len(locs) == 2:
            spots[i] = tuple(c if by_row else r for r, c in locs)
    lines = sorted(spots)
    for x, i in enumerate(lines):
        for j in lines[x + 1:]:
            if spots[i] != spots[j]:
                continue
            elim = []
            for k in spots[i]:
                cross = unit_cells_col(k) if by_row else unit_cells_row(k)
                elim += [
                    cell for cell in _positions(candidates, cross, d)
                    if (cell[0] if by_row else cell[1]) not in (i, j)
                ]
            if elim:
                kind, other = ("row", "column") if by_row else ("column", "row")
                a, b = (k + 1 for k in spots[i])
                moves.append(
                    {
                        "technique": X_WING,
                        "type": "elimination",
                        "digit": d,
                        "eliminate": elim,
                        "unit": f"{kind[0]}{i + 1}",
                        "explanation": (
                            f"In {kind}s {i + 1} and {j + 1}, digit {d} is confined to {other}s {a} and {b}. "
                            f"Eliminate {d} from those {other}s elsewhere."
                        ),
                    }
                )
    return moves


def find_x_wing(grid: Grid, candidates: Candidates) -> list[Move]:
    moves = []
    for d in DIGITS:
        moves += _x_wing_lines(candidates, d, by_row=True)
        moves += _x_wing_lines(candidates, d, by_row=False)
    return moves

