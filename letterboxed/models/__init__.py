"""
Puzzle data, load states and the client for the puzzle-data service.

Usage:
    from letterboxed.models import PuzzleClient

    puzzle = PuzzleClient("http://localhost:5000").fetch()
    print(puzzle.square.top, puzzle.nyt_solution)
"""

from .puzzle import (
    Side,
    PuzzleSquare,
    Puzzle,
    PuzzleNotReady,
    parse_puzzle,
    puzzle_to_dict,
    solution_words,
)
from .load_state import (
    Loading,
    Ready,
    Failed,
    LoadState,
    InvalidTransition,
)
from .api_client import PuzzleClient, DEFAULT_ENDPOINT

__all__ = [
    # Puzzle data
    "Side",
    "PuzzleSquare",
    "Puzzle",
    "PuzzleNotReady",
    "parse_puzzle",
    "puzzle_to_dict",
    "solution_words",

    # Load states
    "Loading",
    "Ready",
    "Failed",
    "LoadState",
    "InvalidTransition",

    # Service client
    "PuzzleClient",
    "DEFAULT_ENDPOINT",
]
