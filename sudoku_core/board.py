"""The puzzle a player works on: current values, solution, clue mask and pencil marks."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .carving import generate_puzzle
from .config import GeneratorConfig
from .difficulty import TECHNIQUES_BY_DIFFICULTY, Difficulty
from .errors import InvalidStateError
from .propagation import next_move, rate_difficulty
from .search import count_solutions, solve
from .solver_core import clone_grid, in_bounds, rc_to_key
from .types_sudoku import ConflictIssue, Grid, Move, PencilMarks
from .validator import PlacementValidator, find_conflicts, is_valid_solution

log = logging.getLogger(__name__)


def _digit(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 9


def _check_shape(name: str, rows: Sequence) -> None:
    if len(rows) != 9 or any(len(row) != 9 for row in rows):
        raise InvalidStateError(f"{name} must be 9x9")


def _normalize(rows: Sequence[Sequence[Optional[int]]]) -> Grid:
    """Copy rows into a grid; 0 is accepted as empty on the way in."""
    _check_shape("board", rows)
    grid = []
    for row in rows:
        out = []
        for v in row:
            if v is None or v == 0:
                out.append(None)
            elif _digit(v):
                out.append(v)
            else:
                raise InvalidStateError(f"cell value out of range: {v!r}")
        grid.append(out)
    return grid


class Puzzle:
    """A 9x9 puzzle owned by one consumer.

    Out-of-range indices and writes to clue cells are rejected with a False
    (or empty) return, never an exception. Every accepted mutation clears the
    completion, fill-count and placement caches.

    `is_valid_placement` is structural by default: it only checks the row,
    column and box of the current board, so a legal but wrong guess passes.
    Pass `against_solution=True` to also require the solution digit.
    """

    def __init__(
        self,
        board: Sequence[Sequence[Optional[int]]],
        solution: Sequence[Sequence[int]],
        fixed: Sequence[Sequence[bool]],
        difficulty: Difficulty | str,
        pencil_marks: Optional[dict[tuple[int, int], set[int]]] = None,
    ):
        self._board = _normalize(board)
        _check_shape("solution", solution)
        self._solution: Grid = [list(row) for row in solution]
        if not is_valid_solution(self._solution):
            raise InvalidStateError("solution is not a complete valid grid")
        _check_shape("fixed", fixed)
        self._fixed = [[bool(v) for v in row] for row in fixed]
        self._difficulty = Difficulty.parse(difficulty)

        for r in range(9):
            for c in range(9):
                if self._fixed[r][c] and self._board[r][c] != self._solution[r][c]:
                    raise InvalidStateError(f"clue {rc_to_key(r, c)} does not match the solution")

        self._pencil_marks: dict[tuple[int, int], set[int]] = {}
        for (r, c), digits in (pencil_marks or {}).items():
            if not in_bounds(r, c) or not all(_digit(d) for d in digits):
                raise InvalidStateError(f"bad pencil marks at {(r, c)!r}: {digits!r}")
            if digits:
                self._pencil_marks[(r, c)] = set(digits)

        self._complete_cache: Optional[bool] = None
        self._filled_cache: Optional[int] = None
        self._validator = PlacementValidator(self._board)
        self._solution_validator = PlacementValidator(self._board, self._solution)

    # construction

    @classmethod
    def generate(
        cls,
        difficulty: Difficulty | str = Difficulty.EASY,
        rng: Optional[np.random.Generator | int] = None,
        config: Optional[GeneratorConfig] = None,
    ) -> "Puzzle":
        """Fresh puzzle; raises GenerationExhausted if the retry cap is hit."""
        result = generate_puzzle(difficulty, rng, config)
        fixed = [[v is not None for v in row] for row in result.puzzle]
        return cls(result.puzzle, result.solution, fixed, difficulty)

    @classmethod
    def from_clues(
        cls,
        rows: Sequence[Sequence[Optional[int]]],
        difficulty: Difficulty | str | None = None,
    ) -> "Puzzle":
        """Puzzle whose non-empty cells are the clues. The clues must admit
        exactly one solution. Without an explicit difficulty the puzzle is
        rated by the technique ladder, Expert when logic alone cannot finish it.
        """
        clues = _normalize(rows)
        if find_conflicts(clues):
            raise InvalidStateError("clues contain duplicate digits")
        n = count_solutions(clues, limit=2)
        if n != 1:
            raise InvalidStateError("clues have no solution" if n == 0 else "clues have more than one solution")
        solution = solve(clues)
        if difficulty is None:
            difficulty = rate_difficulty(clues) or Difficulty.EXPERT
            log.debug("imported clues rated %s", Difficulty.parse(difficulty).value)
        fixed = [[v is not None for v in row] for row in clues]
        return cls(clues, solution, fixed, difficulty)

    # queries

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def clue_count(self) -> int:
        return sum(v for row in self._fixed for v in row)

    def get_value(self, row: int, col: int) -> Optional[int]:
        if not in_bounds(row, col):
            return None
        return self._board[row][col]

    def get_solution_value(self, row: int, col: int) -> Optional[int]:
        if not in_bounds(row, col):
            return None
        return self._solution[row][col]

    def is_fixed(self, row: int, col: int) -> bool:
        return in_bounds(row, col) and self._fixed[row][col]

    def is_correct_value(self, row: int, col: int, value: int) -> bool:
        return in_bounds(row, col) and self._solution[row][col] == value

    def is_valid_placement(self, row: int, col: int, value: int, against_solution: bool = False) -> bool:
        validator = self._solution_validator if against_solution else self._validator
        return validator.is_valid(row, col, value)

    def has_empty_cells(self) -> bool:
        return self.filled_count() < 81

    def filled_count(self) -> int:
        if self._filled_cache is None:
            self._filled_cache = sum(1 for row in self._board for v in row if v is not None)
        return self._filled_cache

    def is_complete(self) -> bool:
        if self._complete_cache is None:
            self._complete_cache = not self.has_empty_cells() and is_valid_solution(self._board)
        return self._complete_cache

    def conflicts(self) -> list[ConflictIssue]:
        return find_conflicts(self._board)

    def hint(self) -> Optional[Move]:
        """Next logical step for the current board within this tier's techniques."""
        return next_move(self._board, TECHNIQUES_BY_DIFFICULTY[self._difficulty])

    def to_rows(self) -> list[list[int]]:
        return [[v or 0 for v in row] for row in self._board]

    def board(self) -> Grid:
        return clone_grid(self._board)

    def solution(self) -> Grid:
        return clone_grid(self._solution)

    def fixed_mask(self) -> list[list[bool]]:
        return [row[:] for row in self._fixed]

    # mutation

    def set_value(self, row: int, col: int, value: Optional[int]) -> bool:
        """Write (or clear, with None) a non-clue cell; True only if the board changed."""
        if not in_bounds(row, col) or self._fixed[row][col]:
            return False
        if value is not None and not _digit(value):
            return False
        if self._board[row][col] == value:
            return False
        self._board[row][col] = value
        self._invalidate()
        return True

    # pencil marks

    def toggle_pencil_mark(self, row: int, col: int, digit: int) -> bool:
        if not in_bounds(row, col) or not _digit(digit):
            return False
        marks = self._pencil_marks.setdefault((row, col), set())
        if digit in marks:
            marks.discard(digit)
            if not marks:
                del self._pencil_marks[(row, col)]
        else:
            marks.add(digit)
        self._invalidate()
        return True

    def get_pencil_marks(self, row: int, col: int) -> set[int]:
        return set(self._pencil_marks.get((row, col), ()))

    def is_pencil_mark_set(self, row: int, col: int, digit: int) -> bool:
        return digit in self._pencil_marks.get((row, col), ())

    def has_pencil_marks(self, row: int, col: int) -> bool:
        return (row, col) in self._pencil_marks

    def clear_pencil_marks(self, row: int, col: int) -> bool:
        if not in_bounds(row, col):
            return False
        self._pencil_marks.pop((row, col), None)
        return True

    def pencil_marks(self) -> PencilMarks:
        return {rc_to_key(r, c): sorted(d) for (r, c), d in sorted(self._pencil_marks.items())}

    def reset_to_original(self):
        for r in range(9):
            for c in range(9):
                if not self._fixed[r][c]:
                    self._board[r][c] = None
        self._pencil_marks.clear()
        self._invalidate()

    def _invalidate(self):
        self._complete_cache = None
        self._filled_cache = None
        self._validator.invalidate()
        self._solution_validator.invalidate()

    # comparison

    def __eq__(self, other):
        if not isinstance(other, Puzzle):
            return NotImplemented
        return (
            self._board == other._board
            and self._solution == other._solution
            and self._fixed == other._fixed
            and self._difficulty == other._difficulty
            and self._pencil_marks == other._pencil_marks
        )

    __hash__ = None

    def __repr__(self):
        return (
            f"Puzzle(difficulty={self._difficulty.value!r}, clues={self.clue_count}, "
            f"filled={self.filled_count()})"
        )
