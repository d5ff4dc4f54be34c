"""Demo front-end for the puzzle core: generate puzzles and print them as JSON payloads."""

# generate_cli.py
# - Generates --count puzzles for one difficulty (seeded for repeatability)
# - Rates each puzzle with the technique ladder
# - Prints one JSON payload with the puzzles, solutions and a snapshot each
#
# Usage:
#   python apps/cli/generate_cli.py --difficulty hard --count 3 --seed 123

import argparse
import json
import logging

from tqdm import tqdm

from sudoku_core import Difficulty, Puzzle, encode, load_config
from sudoku_core.generator import make_rng
from sudoku_core.propagation import rate_difficulty


def format_board(rows):
    """Pretty 9x9 text block, '.' for blanks."""
    lines = []
    for r, row in enumerate(rows):
        cells = ["." if v == 0 else str(v) for v in row]
        lines.append(" ".join(cells[0:3]) + " | " + " ".join(cells[3:6]) + " | " + " ".join(cells[6:9]))
        if r in (2, 5):
            lines.append("------+-------+------")
    return "\n".join(lines)


def main(args):
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    config = load_config(args.config, seed=args.seed)
    rng = make_rng(config.seed)
    difficulty = Difficulty.parse(args.difficulty)

    puzzles = []
    for _ in tqdm(range(args.count), desc=f"{difficulty.value} puzzles", disable=args.count < 2):
        puzzle = Puzzle.generate(difficulty, rng=rng, config=config)
        rating = rate_difficulty(puzzle.board())
        puzzles.append(
            {
                "clues": puzzle.clue_count,
                "rating": rating.value if rating else None,
                "puzzle": puzzle.to_rows(),
                "solution": puzzle.solution(),
                "snapshot": json.loads(encode(puzzle)),
            }
        )
        if args.pretty:
            print(format_board(puzzle.to_rows()), end="\n\n")

    payload = {"difficulty": difficulty.value, "seed": config.seed, "puzzles": puzzles}
    print(json.dumps(payload, indent=2))
    return payload


def build_parser():
    ap = argparse.ArgumentParser()
    ap.add_argument("--difficulty", type=str, default="easy", choices=[d.value for d in Difficulty])
    ap.add_argument("--count", type=int, default=1)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--config", type=str, default=None, help="YAML generator config")
    ap.add_argument("--pretty", action="store_true", help="Also print each puzzle as a text grid")
    ap.add_argument("--verbose", action="store_true")
    return ap


if __name__ == "__main__":
    main(build_parser().parse_args())
