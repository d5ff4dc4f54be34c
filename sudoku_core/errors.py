"""Exception types raised by the puzzle core."""

from __future__ import annotations


class SudokuError(Exception):
    """Base class for all errors raised by sudoku_core."""


class GenerationExhausted(SudokuError):
    """A solved grid or a carved puzzle could not be produced within the retry cap."""

    def __init__(self, what: str, attempts: int):
        super().__init__(f"{what}: no valid result after {attempts} attempts")
        self.what = what
        self.attempts = attempts


class InvalidStateError(SudokuError, ValueError):
    """Reconstructed puzzle state violates a grid invariant."""


class SnapshotError(InvalidStateError):
    """A serialized snapshot could not be decoded."""


class ConfigError(SudokuError, ValueError):
    """Generator configuration is malformed."""
