"""Difficulty tiers and the per-tier carving profile."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .solver_core import CLAIMING, HIDDEN_SINGLE, NAKED_PAIR, NAKED_SINGLE, POINTING, X_WING


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown difficulty: {value!r}") from None


SINGLES = (NAKED_SINGLE, HIDDEN_SINGLE)
PAIRS = SINGLES + (NAKED_PAIR,)
ADVANCED = PAIRS + (POINTING, CLAIMING, X_WING)

TECHNIQUES_BY_DIFFICULTY: dict[Difficulty, tuple[str, ...]] = {
    Difficulty.EASY: SINGLES,
    Difficulty.MEDIUM: PAIRS,
    Difficulty.HARD: ADVANCED,
    Difficulty.EXPERT: ADVANCED,
}


@dataclass(frozen=True)
class DifficultyProfile:
    """How a tier is carved.

    clue_range: closed (low, high) range the final clue count must land in.
    min_clues_per_unit: every row, column and box keeps at least this many clues.
    techniques: propagation techniques that must suffice to solve the puzzle.
    ordering: 'density' removes from the fullest units first, 'random' shuffles.
    require_logic: gate each removal on the technique ladder.
    """

    clue_range: tuple[int, int]
    min_clues_per_unit: int
    techniques: tuple[str, ...]
    ordering: str = "random"
    require_logic: bool = True

    def __post_init__(self):
        low, high = self.clue_range
        if not 17 <= low <= high <= 81:
            raise ValueError(f"invalid clue range {self.clue_range}")
        if not 0 <= self.min_clues_per_unit <= 9:
            raise ValueError(f"invalid min_clues_per_unit {self.min_clues_per_unit}")
        unknown = set(self.techniques) - set(ADVANCED)
        if unknown:
            raise ValueError(f"unknown techniques {sorted(unknown)}")
        if self.ordering not in ("density", "random"):
            raise ValueError(f"invalid ordering {self.ordering!r}")

    def accepts(self, clues: int) -> bool:
        low, high = self.clue_range
        return low <= clues <= high


def default_profiles() -> dict[Difficulty, DifficultyProfile]:
    return {
        Difficulty.EASY: DifficultyProfile((40, 45), 3, SINGLES, ordering="density"),
        Difficulty.MEDIUM: DifficultyProfile((34, 38), 2, PAIRS),
        Difficulty.HARD: DifficultyProfile((28, 32), 2, ADVANCED),
        Difficulty.EXPERT: DifficultyProfile((24, 27), 1, ADVANCED),
    }
