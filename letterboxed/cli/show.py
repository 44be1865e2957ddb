from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.env import Settings, load_settings
from ..core.logging_config import setup_logging
from ..loader import PuzzleLoader, describe
from ..models.api_client import PuzzleClient
from ..models.load_state import Failed, LoadState, Loading, Ready
from ..models.puzzle import Puzzle, PuzzleNotReady, Side, parse_puzzle, puzzle_to_dict
from ..overlay import DEFAULT_TILE_COLOR, PuzzleOverlay, word_color
from ..render import render_svg

app = typer.Typer(help="Fetch today's Letter Boxed puzzle and lay out its solutions.")
console = Console()


def _print_state(state: LoadState) -> None:
    if isinstance(state, Loading):
        console.print(f"[dim]{describe(state)}[/]")
    elif isinstance(state, Ready):
        console.print(f"[green]{describe(state)}[/]")


def _setup(debug: bool) -> Settings:
    setup_logging(logging.DEBUG if debug else logging.WARNING)
    try:
        settings = load_settings()
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1)
    if debug:
        console.print(settings)
    return settings


def _load_puzzle(settings: Settings, endpoint: Optional[str]) -> Puzzle:
    client = PuzzleClient(endpoint or settings.endpoint, timeout=settings.request_timeout)
    loader = PuzzleLoader(
        client.fetch,
        retry_delay=settings.retry_delay,
        max_attempts=settings.max_attempts,
    )
    loader.subscribe(_print_state)
    try:
        state = asyncio.run(loader.load())
    finally:
        loader.close()
        client.close()

    if isinstance(state, Failed):
        console.print(f"[red]Error:[/] {state.reason}")
        raise typer.Exit(code=1)
    return state.puzzle


def _read_puzzle(path: str) -> Puzzle:
    try:
        return parse_puzzle(orjson.loads(Path(path).read_bytes()))
    except (OSError, PuzzleNotReady, orjson.JSONDecodeError) as e:
        console.print(f"[red]Error:[/] could not read puzzle from {path}: {e}")
        raise typer.Exit(code=1)


def _obtain_puzzle(settings: Settings, endpoint: Optional[str], from_file: Optional[str]) -> Puzzle:
    if from_file:
        return _read_puzzle(from_file)
    return _load_puzzle(settings, endpoint)


def _solution_text(words) -> Text:
    text = Text()
    for i, word in enumerate(words):
        if i:
            text.append("  ")
        text.append(word[:1], style=f"bold {word_color(i)}")
        text.append(word[1:])
    return text


@app.command()
def fetch(
    endpoint: Optional[str] = None,
    save: Optional[str] = None,
    debug: bool = False,
):
    """Load the puzzle (retrying while the server is busy) and print it."""
    settings = _setup(debug)
    puzzle = _load_puzzle(settings, endpoint)

    table = Table(title="Today's Puzzle")
    table.add_column("Side", style="cyan")
    table.add_column("Letters", style="bold")
    for side in Side:
        table.add_row(side.value, " ".join(puzzle.square.letters(side)))
    console.print(table)

    console.print(Text("LottaWords Solution: ", style="bold").append_text(_solution_text(puzzle.lotta_solution)))
    console.print(Text("NYT Solution:        ", style="bold").append_text(_solution_text(puzzle.nyt_solution)))

    if save:
        out = Path(save)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(orjson.dumps(puzzle_to_dict(puzzle), option=orjson.OPT_INDENT_2))
        console.print(f"[green]Saved[/] puzzle to {out}")


@app.command()
def layout(
    width: float = 400,
    height: float = 400,
    nyt: bool = False,
    endpoint: Optional[str] = None,
    from_file: Optional[str] = None,
    debug: bool = False,
):
    """Print each letter's position and highlight colour."""
    settings = _setup(debug)
    puzzle = _obtain_puzzle(settings, endpoint, from_file)
    overlay = PuzzleOverlay(puzzle, width, height, padding=settings.padding, show_nyt=nyt)

    title = "NYT Solution" if overlay.show_nyt else "LottaWords Solution"
    table = Table(title=f"Letter positions ({title})")
    table.add_column("Slot", style="cyan")
    table.add_column("Letter", style="bold")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Highlight")

    for side, index, letter in overlay.square.slots():
        point = overlay.positions.get((side, index))
        color = overlay.highlight_color(side, index)
        table.add_row(
            f"{side.value}-{index}",
            letter,
            f"{point.x:.1f}" if point else "-",
            f"{point.y:.1f}" if point else "-",
            Text(color, style=color) if color else Text(DEFAULT_TILE_COLOR, style="dim"),
        )
    console.print(table)
    console.print(f"[cyan]{len(overlay.segments)}[/] connection segments")


@app.command()
def render(
    out: str = "puzzle.svg",
    width: float = 400,
    height: float = 400,
    nyt: bool = False,
    endpoint: Optional[str] = None,
    from_file: Optional[str] = None,
    debug: bool = False,
):
    """Write the puzzle and its animated solution overlay as SVG."""
    settings = _setup(debug)
    puzzle = _obtain_puzzle(settings, endpoint, from_file)
    overlay = PuzzleOverlay(puzzle, width, height, padding=settings.padding, show_nyt=nyt)

    path = Path(out)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_svg(overlay), encoding="utf-8")
    console.print(f"[green]Wrote[/] {len(overlay.segments)} segments to {path}")


if __name__ == "__main__":
    app()
