import numpy as np
import pytest

from sudoku_core import generator
from sudoku_core.errors import GenerationExhausted
from sudoku_core.generator import (
    TRANSFORMATIONS,
    apply_transformation,
    base_pattern,
    generate_solution,
    make_rng,
    scramble,
)
from sudoku_core.validator import is_valid_solution


def test_base_pattern_is_valid(rng):
    for _ in range(10):
        assert is_valid_solution(base_pattern(rng).tolist())


@pytest.mark.parametrize("name", TRANSFORMATIONS)
def test_each_transformation_preserves_validity(rng, name):
    board = base_pattern(rng)
    for _ in range(20):
        board = apply_transformation(board, name, rng)
        assert is_valid_solution(board.tolist())


def test_unknown_transformation(rng):
    with pytest.raises(ValueError):
        apply_transformation(base_pattern(rng), "mirror", rng)


def test_scramble_changes_the_grid(rng):
    board = base_pattern(rng)
    scrambled = scramble(board, rng, steps=100)
    assert not np.array_equal(board, scrambled)
    assert is_valid_solution(scrambled.tolist())


def test_generated_solutions_are_complete_and_valid():
    rng = make_rng(7)
    for _ in range(25):
        grid = generate_solution(rng)
        assert all(isinstance(v, int) for row in grid for v in row)
        assert is_valid_solution(grid)


def test_same_seed_same_grid():
    assert generate_solution(make_rng(42)) == generate_solution(make_rng(42))
    assert generate_solution(make_rng(42)) != generate_solution(make_rng(43))


def test_make_rng_passes_generators_through(rng):
    assert make_rng(rng) is rng


def test_retry_cap_raises(monkeypatch):
    calls = []

    def never_valid(grid):
        calls.append(grid)
        return False

    monkeypatch.setattr(generator, "is_valid_solution", never_valid)
    with pytest.raises(GenerationExhausted) as err:
        generate_solution(make_rng(0), max_attempts=4)
    assert err.value.attempts == 4
    assert len(calls) == 4
