import pytest

from sudoku_core import Difficulty, InvalidStateError, Puzzle
from sudoku_core.generator import make_rng


def _from_clues(clues, solution, difficulty=Difficulty.EASY):
    fixed = [[v is not None for v in row] for row in clues]
    return Puzzle(clues, solution, fixed, difficulty)


@pytest.fixture
def puzzle(classic, classic_solution):
    return _from_clues(classic, classic_solution)


def test_queries(puzzle, classic_solution):
    assert puzzle.get_value(0, 0) == 5
    assert puzzle.get_value(0, 2) is None
    assert puzzle.is_fixed(0, 0)
    assert not puzzle.is_fixed(0, 2)
    assert puzzle.get_solution_value(0, 2) == 4
    assert puzzle.clue_count == 30
    assert puzzle.filled_count() == 30
    assert puzzle.has_empty_cells()
    assert not puzzle.is_complete()
    assert puzzle.solution() == classic_solution


@pytest.mark.parametrize("row,col", [(-1, 0), (0, 9), (9, 9), (3, -2)])
def test_out_of_range_is_rejected_quietly(puzzle, row, col):
    assert puzzle.get_value(row, col) is None
    assert puzzle.get_solution_value(row, col) is None
    assert not puzzle.is_fixed(row, col)
    assert not puzzle.set_value(row, col, 1)
    assert not puzzle.toggle_pencil_mark(row, col, 1)
    assert not puzzle.is_valid_placement(row, col, 1)
    assert puzzle.get_pencil_marks(row, col) == set()


def test_fixed_clue_cannot_be_overwritten(puzzle):
    assert not puzzle.set_value(0, 0, 5)
    assert not puzzle.set_value(0, 0, 9)
    assert not puzzle.set_value(0, 0, None)
    assert puzzle.get_value(0, 0) == 5


def test_every_fixed_cell_of_a_generated_puzzle_is_immutable():
    for difficulty in Difficulty:
        p = Puzzle.generate(difficulty, rng=make_rng(31))
        before = p.board()
        for r in range(9):
            for c in range(9):
                if p.is_fixed(r, c):
                    other = p.get_value(r, c) % 9 + 1
                    assert not p.set_value(r, c, other)
        assert p.board() == before
        assert p.difficulty is difficulty


def test_set_value_accepts_wrong_guesses(puzzle):
    assert puzzle.set_value(0, 2, 1)
    assert puzzle.get_value(0, 2) == 1
    assert not puzzle.is_correct_value(0, 2, 1)
    assert puzzle.is_correct_value(0, 2, 4)
    # unchanged value and out-of-range digits are no-ops
    assert not puzzle.set_value(0, 2, 1)
    assert not puzzle.set_value(0, 2, 10)
    assert not puzzle.set_value(0, 2, 0)
    assert puzzle.set_value(0, 2, None)
    assert puzzle.get_value(0, 2) is None


def test_placement_is_structural_unless_asked(puzzle):
    assert puzzle.is_valid_placement(0, 2, 1)
    assert not puzzle.is_valid_placement(0, 2, 1, against_solution=True)
    assert puzzle.is_valid_placement(0, 2, 4, against_solution=True)
    assert not puzzle.is_valid_placement(0, 2, 5)  # 5 already in row 1
    assert not puzzle.is_valid_placement(0, 2, 0)


def test_placement_memo_is_cleared_on_write(puzzle):
    assert puzzle.is_valid_placement(0, 2, 1)
    assert puzzle.set_value(0, 3, 1)
    assert not puzzle.is_valid_placement(0, 2, 1)
    assert puzzle.set_value(0, 3, None)
    assert puzzle.is_valid_placement(0, 2, 1)


def test_completion_tracks_mutations(puzzle, classic_solution):
    for r in range(9):
        for c in range(9):
            if not puzzle.is_fixed(r, c):
                assert not puzzle.is_complete()
                puzzle.set_value(r, c, classic_solution[r][c])
    assert not puzzle.has_empty_cells()
    assert puzzle.is_complete()
    assert puzzle.set_value(0, 2, None)
    assert not puzzle.is_complete()


def test_full_board_with_duplicates_is_not_complete(classic_solution):
    no_clues = [[False] * 9 for _ in range(9)]
    p = Puzzle([[1] * 9 for _ in range(9)], classic_solution, no_clues, "easy")
    assert not p.has_empty_cells()
    assert not p.is_complete()
    assert p.conflicts()

    # swap two cells of a valid grid: still full, now broken
    rows = [row[:] for row in classic_solution]
    rows[0][0], rows[0][1] = rows[0][1], rows[0][0]
    p = Puzzle(rows, classic_solution, no_clues, "easy")
    assert not p.is_complete()


def test_pencil_marks_toggle_back(puzzle):
    assert puzzle.get_pencil_marks(0, 2) == set()
    assert puzzle.toggle_pencil_mark(0, 2, 4)
    assert puzzle.toggle_pencil_mark(0, 2, 1)
    assert puzzle.get_pencil_marks(0, 2) == {1, 4}
    assert puzzle.is_pencil_mark_set(0, 2, 4)
    assert puzzle.has_pencil_marks(0, 2)

    puzzle.toggle_pencil_mark(0, 2, 7)
    puzzle.toggle_pencil_mark(0, 2, 7)
    assert puzzle.get_pencil_marks(0, 2) == {1, 4}

    assert not puzzle.toggle_pencil_mark(0, 2, 0)
    assert puzzle.clear_pencil_marks(0, 2)
    assert not puzzle.has_pencil_marks(0, 2)
    assert puzzle.get_pencil_marks(0, 2) == set()


def test_pencil_marks_are_returned_as_copies(puzzle):
    puzzle.toggle_pencil_mark(1, 1, 2)
    marks = puzzle.get_pencil_marks(1, 1)
    marks.add(9)
    assert puzzle.get_pencil_marks(1, 1) == {2}


def test_reset_to_original(puzzle, classic):
    puzzle.set_value(0, 2, 4)
    puzzle.set_value(8, 0, 1)
    puzzle.toggle_pencil_mark(1, 1, 7)
    puzzle.reset_to_original()
    assert puzzle.board() == classic
    assert puzzle.filled_count() == 30
    assert not puzzle.has_pencil_marks(1, 1)


def test_conflicts_report_units(puzzle):
    assert puzzle.conflicts() == []
    puzzle.set_value(0, 2, 3)
    issues = puzzle.conflicts()
    units = {issue["unit"] for issue in issues}
    assert units == {"r1", "b1"}
    assert all("r1c3" in issue["cells"] for issue in issues)
    for issue in issues:
        assert issue["type"] == "duplicate"
        assert set(issue) == {"type", "unit", "digits", "cells"}
        assert issue["digits"] == [3]


def test_hint_uses_the_tier_techniques(puzzle, classic_solution):
    move = puzzle.hint()
    assert move is not None
    r, c = move["cell"]
    assert move["digit"] == classic_solution[r][c]


def test_to_rows_uses_zero_for_blanks(puzzle, classic):
    assert puzzle.to_rows() == [[v or 0 for v in row] for row in classic]


def test_constructor_validates_state(classic, classic_solution):
    fixed = [[v is not None for v in row] for row in classic]
    bad_solution = [row[:] for row in classic_solution]
    bad_solution[0][0], bad_solution[0][1] = bad_solution[0][1], bad_solution[0][0]
    with pytest.raises(InvalidStateError):
        Puzzle(classic, bad_solution, fixed, "easy")

    wrong_clue = [row[:] for row in classic]
    wrong_clue[0][0] = 9
    with pytest.raises(InvalidStateError):
        Puzzle(wrong_clue, classic_solution, fixed, "easy")

    with pytest.raises(InvalidStateError):
        Puzzle(classic[:8], classic_solution, fixed, "easy")

    with pytest.raises(ValueError):
        Puzzle(classic, classic_solution, fixed, "impossible")


def test_from_clues_rates_and_solves(classic, hardest, hardest_solution):
    p = Puzzle.from_clues([[v or 0 for v in row] for row in classic])
    assert p.clue_count == 30
    assert p.difficulty in (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)

    p = Puzzle.from_clues(hardest)
    assert p.difficulty is Difficulty.EXPERT
    assert p.solution() == hardest_solution

    p = Puzzle.from_clues(hardest, difficulty="hard")
    assert p.difficulty is Difficulty.HARD


def test_from_clues_rejects_ambiguous_or_broken(classic):
    with pytest.raises(InvalidStateError):
        Puzzle.from_clues([[None] * 9 for _ in range(9)])
    broken = [row[:] for row in classic]
    broken[0][2] = 5
    with pytest.raises(InvalidStateError):
        Puzzle.from_clues(broken)


def test_equality(puzzle, classic, classic_solution):
    other = _from_clues(classic, classic_solution)
    assert puzzle == other
    other.toggle_pencil_mark(0, 2, 4)
    assert puzzle != other
