from letterboxed.models.puzzle import Puzzle, PuzzleSquare
from letterboxed.overlay import DEFAULT_TILE_COLOR, PALETTE, PuzzleOverlay
from letterboxed.render import render_svg


def test_svg_contains_square_paths_and_tiles(puzzle):
    overlay = PuzzleOverlay(puzzle, 400, 400, padding=45)
    svg = render_svg(overlay)

    assert svg.startswith("<svg")
    assert svg.rstrip().endswith("</svg>")
    assert '<rect x="45" y="45" width="310" height="310"' in svg
    assert svg.count("<path ") == len(overlay.segments) == 6
    assert svg.count("<text ") == 12
    assert 'stroke-dasharray="5,5"' in svg
    assert 'attributeName="stroke-dashoffset" from="20" to="0"' in svg
    assert f'd="{overlay.segments[0].path}"' in svg


def test_tile_colors_follow_selection(puzzle):
    overlay = PuzzleOverlay(puzzle, 400, 400)
    svg = render_svg(overlay)
    assert f'fill="{PALETTE[0]}"' in svg          # B starts BEKFJ
    assert f'fill="{DEFAULT_TILE_COLOR}"' in svg

    overlay.toggle()
    toggled = render_svg(overlay)
    assert toggled != svg
    assert toggled.count("<path ") == 4


def test_letters_are_escaped():
    square = PuzzleSquare(top="<&", right="B", bottom="C", left="D")
    overlay = PuzzleOverlay(Puzzle(square, ("BC",), ("CD",)), 200, 200)
    svg = render_svg(overlay)
    assert "&lt;</text>" in svg
    assert "&amp;</text>" in svg


def test_unmeasured_overlay_draws_no_tiles(puzzle):
    svg = render_svg(PuzzleOverlay(puzzle))
    assert "<text " not in svg
    assert "<path " not in svg
