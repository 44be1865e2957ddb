"""
Letter layout: maps every (side, index) slot of a square to a point inside
the measured container.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .models.puzzle import PuzzleSquare, Side

DEFAULT_PADDING = 45.0

Slot = Tuple[Side, int]


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def _centers(length: float, count: int, padding: float) -> list[float]:
    """Evenly spaced cell centres along one side, offset by padding."""
    step = length / count
    return [padding + step * i + step / 2 for i in range(count)]


def compute_letter_positions(
    square: PuzzleSquare,
    width: float,
    height: float,
    padding: float = DEFAULT_PADDING,
) -> Dict[Slot, Point]:
    """
    Compute the centre of every letter tile.

    Top and bottom letters spread across the usable width, right and left
    letters across the usable height. Corner slots of adjacent sides are
    never merged, even when they land on the same point.

    Returns an empty mapping until the container has a positive size.
    """
    if width <= 0 or height <= 0:
        return {}

    usable_width = width - 2 * padding
    usable_height = height - 2 * padding
    positions: Dict[Slot, Point] = {}

    for i, x in enumerate(_centers(usable_width, len(square.top), padding)):
        positions[(Side.TOP, i)] = Point(x, padding)

    for i, y in enumerate(_centers(usable_height, len(square.right), padding)):
        positions[(Side.RIGHT, i)] = Point(usable_width + padding, y)

    for i, x in enumerate(_centers(usable_width, len(square.bottom), padding)):
        positions[(Side.BOTTOM, i)] = Point(x, usable_height + padding)

    for i, y in enumerate(_centers(usable_height, len(square.left), padding)):
        positions[(Side.LEFT, i)] = Point(padding, y)

    return positions


def find_letter_slot(square: PuzzleSquare, letter: str) -> Optional[Slot]:
    """
    First slot holding `letter`, scanning top, right, bottom, left.

    Comparison ignores case. When a letter sits on more than one side the
    earliest side in scan order wins.
    """
    target = letter.upper()
    for side in Side:
        for index, candidate in enumerate(square.letters(side)):
            if candidate.upper() == target:
                return side, index
    return None
