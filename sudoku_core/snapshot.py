"""Lossless save/restore of a Puzzle as JSON.

    {"board": [[5, null, ...], ...], "solution": [[5, 3, ...], ...],
     "fixed": [[true, false, ...], ...], "difficulty": "medium",
     "pencil_marks": {"r1c2": [1, 4]}}

A bare 9x9 integer array (0 = empty) is also accepted as a legacy payload:
its non-zero cells become the clues.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .board import Puzzle
from .difficulty import Difficulty
from .errors import InvalidStateError, SnapshotError
from .solver_core import key_to_rc

CellValue = Annotated[int, Field(ge=0, le=9)]
SolutionValue = Annotated[int, Field(ge=1, le=9)]


def _nine_by_nine(rows: list) -> list:
    if len(rows) != 9 or any(len(row) != 9 for row in rows):
        raise ValueError("must be a 9x9 grid")
    return rows


class PuzzleSnapshot(BaseModel):
    board: list[list[Optional[CellValue]]]
    solution: list[list[SolutionValue]]
    fixed: list[list[bool]]
    difficulty: Difficulty
    pencil_marks: dict[str, list[SolutionValue]] = Field(default_factory=dict)

    @field_validator("board", "solution", "fixed")
    @classmethod
    def check_shape(cls, rows):
        return _nine_by_nine(rows)

    @field_validator("pencil_marks")
    @classmethod
    def check_pencil_keys(cls, marks):
        for key in marks:
            try:
                key_to_rc(key)
            except (ValueError, IndexError):
                raise ValueError(f"bad cell key {key!r}") from None
        return marks

    @classmethod
    def from_puzzle(cls, puzzle: Puzzle) -> "PuzzleSnapshot":
        return cls(
            board=puzzle.board(),
            solution=puzzle.solution(),
            fixed=puzzle.fixed_mask(),
            difficulty=puzzle.difficulty,
            pencil_marks=puzzle.pencil_marks(),
        )

    def to_puzzle(self) -> Puzzle:
        marks = {key_to_rc(key): set(digits) for key, digits in self.pencil_marks.items()}
        return Puzzle(self.board, self.solution, self.fixed, self.difficulty, pencil_marks=marks)


def encode(puzzle: Puzzle) -> str:
    return PuzzleSnapshot.from_puzzle(puzzle).model_dump_json()


def decode(data: str | bytes | dict | list) -> Puzzle:
    """Rebuild a Puzzle from `encode` output, a parsed mapping, or a legacy grid."""
    payload: Any = data
    if isinstance(data, (str, bytes, bytearray)):
        try:
            payload = json.loads(data)
        except ValueError as exc:
            raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
    try:
        if isinstance(payload, list):
            return Puzzle.from_clues(payload)
        if not isinstance(payload, dict):
            raise SnapshotError(f"unsupported snapshot payload: {type(payload).__name__}")
        return PuzzleSnapshot.model_validate(payload).to_puzzle()
    except ValidationError as exc:
        raise SnapshotError(f"invalid snapshot: {exc}") from exc
    except SnapshotError:
        raise
    except (InvalidStateError, TypeError) as exc:
        raise SnapshotError(f"snapshot violates puzzle invariants: {exc}") from exc
