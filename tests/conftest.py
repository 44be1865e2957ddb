import pytest

from letterboxed.models.puzzle import parse_puzzle


@pytest.fixture
def payload():
    """A complete /api/puzzle response."""
    return {
        "square": {"top": "ABC", "right": "DEF", "bottom": "GHI", "left": "JKL"},
        "nyt_solution": ["ADG", "GHL"],
        "lotta_solution": ["BEKFJ", "JIC"],
        "error": None,
    }


@pytest.fixture
def puzzle(payload):
    return parse_puzzle(payload)
