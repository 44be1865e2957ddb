from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple


class Side(str, Enum):
    """One edge of the letter grid. Declaration order is the scan order."""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


class PuzzleNotReady(ValueError):
    """The service answered, but not with a complete puzzle (yet)."""


@dataclass(frozen=True)
class PuzzleSquare:
    """The four sides of letters, exactly as received."""
    top: str
    right: str
    bottom: str
    left: str

    def __post_init__(self):
        for side in Side:
            letters = getattr(self, side.value)
            if not isinstance(letters, str) or not letters:
                raise ValueError(f"Side '{side.value}' must be a non-empty string")

    def letters(self, side: Side) -> str:
        return getattr(self, Side(side).value)

    def slots(self) -> Iterator[Tuple[Side, int, str]]:
        """Yield (side, index, letter) for every slot in scan order."""
        for side in Side:
            for index, letter in enumerate(self.letters(side)):
                yield side, index, letter


@dataclass(frozen=True)
class Puzzle:
    """A complete puzzle: the square plus both precomputed solutions."""
    square: PuzzleSquare
    nyt_solution: Tuple[str, ...]      # reference solution
    lotta_solution: Tuple[str, ...]    # alternative solution


def _parse_solution(data: Dict[str, Any], key: str) -> Tuple[str, ...]:
    words = data.get(key)
    if not isinstance(words, list):
        raise PuzzleNotReady(f"Missing '{key}'")
    if not all(isinstance(w, str) and w for w in words):
        raise PuzzleNotReady(f"All words in '{key}' must be non-empty strings")
    return tuple(words)


def parse_puzzle(data: Any) -> Puzzle:
    """
    Validate a decoded /api/puzzle payload and build a Puzzle.

    Raises:
        PuzzleNotReady: If the payload is empty, carries an error or a
            "loading" status, or is missing any required field.
    """
    if not data or not isinstance(data, dict):
        raise PuzzleNotReady("Empty response")

    if data.get("error"):
        raise PuzzleNotReady(f"Server reported: {data['error']}")
    if data.get("status") == "loading":
        raise PuzzleNotReady("Puzzle is still being computed")

    square = data.get("square")
    if not isinstance(square, dict) or not square.get("top"):
        raise PuzzleNotReady("Received incomplete square")

    try:
        parsed_square = PuzzleSquare(**{side.value: square.get(side.value) for side in Side})
    except ValueError as e:
        raise PuzzleNotReady(str(e)) from e

    return Puzzle(
        square=parsed_square,
        nyt_solution=_parse_solution(data, "nyt_solution"),
        lotta_solution=_parse_solution(data, "lotta_solution"),
    )


def puzzle_to_dict(puzzle: Puzzle) -> Dict[str, Any]:
    """Inverse of parse_puzzle, in the service's wire shape."""
    return {
        "square": {side.value: puzzle.square.letters(side) for side in Side},
        "nyt_solution": list(puzzle.nyt_solution),
        "lotta_solution": list(puzzle.lotta_solution),
        "error": None,
    }


def solution_words(puzzle: Puzzle, nyt: bool) -> List[str]:
    return list(puzzle.nyt_solution if nyt else puzzle.lotta_solution)
