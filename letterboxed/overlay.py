"""
Connection overlay for the selected solution list.

Everything here is derived: segments and highlight colours are recomputed
from (square, positions, selected words) on every call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .layout import DEFAULT_PADDING, Point, Slot, compute_letter_positions, find_letter_slot
from .models.puzzle import Puzzle, PuzzleSquare, Side, solution_words

# Word colours, reused cyclically past the fifth word
PALETTE = ("#faa6a4", "#64C9CF", "#9D65C9", "#5CDB95", "#FFD166")
DEFAULT_TILE_COLOR = "#FF5A57"


def word_color(word_index: int) -> str:
    return PALETTE[word_index % len(PALETTE)]


@dataclass(frozen=True)
class ConnectionSegment:
    start: Point
    end: Point
    color: str
    word_index: int
    pair_index: int

    @property
    def path(self) -> str:
        """SVG path data for a straight line from start to end."""
        return f"M {self.start.x:g} {self.start.y:g} L {self.end.x:g} {self.end.y:g}"


def build_segments(
    square: PuzzleSquare,
    positions: Dict[Slot, Point],
    words: Sequence[str],
) -> List[ConnectionSegment]:
    """
    One segment per consecutive letter pair of every word, in order.

    Pairs whose letters cannot be placed are skipped.
    """
    segments = []
    for word_index, word in enumerate(words):
        color = word_color(word_index)
        for i in range(len(word) - 1):
            start_slot = find_letter_slot(square, word[i])
            end_slot = find_letter_slot(square, word[i + 1])
            start = positions.get(start_slot) if start_slot else None
            end = positions.get(end_slot) if end_slot else None
            if start is None or end is None:
                continue
            segments.append(ConnectionSegment(start, end, color, word_index, i))
    return segments


def highlight_for_letter(letter: str, words: Sequence[str]) -> Optional[str]:
    """Colour of the first word starting with `letter`, or None."""
    target = letter.upper()
    for i, word in enumerate(words):
        if word[:1].upper() == target:
            return word_color(i)
    return None


class PuzzleOverlay:
    """
    Geometry and overlay for one loaded puzzle.

    Holds the inputs (puzzle, container size, which solution is selected)
    and derives positions, segments and highlights from them on demand.
    The alternative solution is selected initially.
    """

    def __init__(
        self,
        puzzle: Puzzle,
        width: float = 0,
        height: float = 0,
        padding: float = DEFAULT_PADDING,
        show_nyt: bool = False,
    ):
        self.puzzle = puzzle
        self.width = width
        self.height = height
        self.padding = padding
        self.show_nyt = show_nyt
        self.positions: Dict[Slot, Point] = {}
        self._relayout()

    def _relayout(self) -> None:
        self.positions = compute_letter_positions(
            self.puzzle.square, self.width, self.height, self.padding
        )

    def resize(self, width: float, height: float) -> None:
        """Record a new measured container size and recompute positions."""
        self.width = width
        self.height = height
        self._relayout()

    def set_puzzle(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle
        self._relayout()

    def toggle(self) -> bool:
        """Swap the selected solution list. Returns True if NYT is now selected."""
        self.show_nyt = not self.show_nyt
        return self.show_nyt

    @property
    def square(self) -> PuzzleSquare:
        return self.puzzle.square

    @property
    def selected_words(self) -> Sequence[str]:
        return solution_words(self.puzzle, self.show_nyt)

    @property
    def segments(self) -> List[ConnectionSegment]:
        return build_segments(self.square, self.positions, self.selected_words)

    def highlight_for_letter(self, letter: str) -> Optional[str]:
        return highlight_for_letter(letter, self.selected_words)

    def highlight_color(self, side: Side, index: int) -> Optional[str]:
        letters = self.square.letters(side)
        if not 0 <= index < len(letters):
            raise IndexError(
                f"No slot {index} on side '{Side(side).value}' ({len(letters)} letters)"
            )
        return self.highlight_for_letter(letters[index])

    def highlights(self) -> Dict[Slot, Optional[str]]:
        return {
            (side, index): self.highlight_for_letter(letter)
            for side, index, letter in self.square.slots()
        }
