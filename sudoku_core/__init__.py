"""
Sudoku puzzle core.

This package contains modules for:
- Solved-grid generation and clue carving per difficulty tier
- Backtracking search (solve, count solutions)
- Human-style constraint propagation (singles, pairs, locked candidates, x-wing)
- The Puzzle model with pencil marks and JSON snapshots
"""

from .board import Puzzle
from .config import GeneratorConfig, load_config
from .difficulty import Difficulty, DifficultyProfile
from .errors import ConfigError, GenerationExhausted, InvalidStateError, SnapshotError, SudokuError
from .snapshot import decode, encode

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "Difficulty",
    "DifficultyProfile",
    "GenerationExhausted",
    "GeneratorConfig",
    "InvalidStateError",
    "Puzzle",
    "SnapshotError",
    "SudokuError",
    "decode",
    "encode",
    "load_config",
]
