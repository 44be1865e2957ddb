"""
SVG output for a puzzle overlay: square outline, animated dashed
connection paths and one tile per letter.
"""

from __future__ import annotations
from typing import List
from xml.sax.saxutils import escape, quoteattr

from .overlay import DEFAULT_TILE_COLOR, PuzzleOverlay

TILE_SIZE = 40
BACKGROUND = "#2a2a2a"

DASH_ANIMATION = (
    '<animate attributeName="stroke-dashoffset" from="20" to="0" '
    'dur="1.5s" repeatCount="indefinite"/>'
)


def render_svg(overlay: PuzzleOverlay) -> str:
    """Render the overlay at its current size and selection."""
    width, height, padding = overlay.width, overlay.height, overlay.padding
    lines: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}" '
        f'viewBox="0 0 {width:g} {height:g}">',
        f'  <rect width="100%" height="100%" fill="{BACKGROUND}"/>',
        f'  <rect x="{padding:g}" y="{padding:g}" width="{width - 2 * padding:g}" '
        f'height="{height - 2 * padding:g}" fill="none" stroke="white" stroke-width="2"/>',
    ]

    for seg in overlay.segments:
        lines.append(
            f'  <path d="{seg.path}" stroke="{seg.color}" stroke-width="2" '
            f'stroke-opacity="0.6" fill="none" stroke-dasharray="5,5">{DASH_ANIMATION}</path>'
        )

    half = TILE_SIZE / 2
    for side, index, letter in overlay.square.slots():
        point = overlay.positions.get((side, index))
        if point is None:
            continue
        fill = overlay.highlight_color(side, index) or DEFAULT_TILE_COLOR
        lines.append(
            f'  <g id={quoteattr(f"{side.value}-{index}")}>'
            f'<rect x="{point.x - half:g}" y="{point.y - half:g}" width="{TILE_SIZE}" '
            f'height="{TILE_SIZE}" rx="8" fill="{fill}"/>'
            f'<text x="{point.x:g}" y="{point.y:g}" fill="white" font-size="24" '
            f'font-weight="bold" text-anchor="middle" dominant-baseline="central">'
            f'{escape(letter)}</text></g>'
        )

    lines.append("</svg>")
    return "\n".join(lines) + "\n"
