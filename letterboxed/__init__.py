"""
Letter Boxed overlay - core modules.
"""

from .layout import Point, compute_letter_positions, find_letter_slot
from .overlay import PALETTE, ConnectionSegment, PuzzleOverlay, build_segments, highlight_for_letter
from .loader import PuzzleLoader, describe, is_ready
from .render import render_svg

__all__ = [
    "Point",
    "compute_letter_positions",
    "find_letter_slot",
    "PALETTE",
    "ConnectionSegment",
    "PuzzleOverlay",
    "build_segments",
    "highlight_for_letter",
    "PuzzleLoader",
    "describe",
    "is_ready",
    "render_svg",
]
