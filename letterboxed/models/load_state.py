"""
Load states for the puzzle loader and the pure transitions between them.

    Loading --retry--> Loading
    Loading --succeed--> Ready
    Loading --fail--> Failed

Ready and Failed are terminal; only begin() (a manual reload) starts over.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .puzzle import Puzzle

INITIAL_MESSAGE = "Loading puzzle..."
TIMED_OUT_MESSAGE = "timed out waiting for puzzle data. Please reload to try again."


@dataclass(frozen=True)
class Loading:
    attempt: int = 0
    message: str = INITIAL_MESSAGE


@dataclass(frozen=True)
class Ready:
    puzzle: Puzzle
    attempt: int = 0


@dataclass(frozen=True)
class Failed:
    reason: str


LoadState = Union[Loading, Ready, Failed]


class InvalidTransition(RuntimeError):
    """Raised when a transition is requested from a state that forbids it."""


def _require_loading(state: LoadState, action: str) -> Loading:
    if not isinstance(state, Loading):
        raise InvalidTransition(f"Cannot {action} from {type(state).__name__}")
    return state


def begin() -> Loading:
    """Fresh start (mount or manual reload)."""
    return Loading(attempt=0, message=INITIAL_MESSAGE)


def retry(state: LoadState, max_attempts: int) -> Loading:
    """One more failed request; stay in Loading with the counter bumped."""
    current = _require_loading(state, "retry")
    attempt = current.attempt + 1
    return Loading(
        attempt=attempt,
        message=f"Loading puzzle... (Attempt {attempt}/{max_attempts})",
    )


def succeed(state: LoadState, puzzle: Puzzle) -> Ready:
    current = _require_loading(state, "succeed")
    return Ready(puzzle=puzzle, attempt=current.attempt)


def fail(state: LoadState, reason: str = TIMED_OUT_MESSAGE) -> Failed:
    _require_loading(state, "fail")
    return Failed(reason=reason)


def is_terminal(state: LoadState) -> bool:
    return isinstance(state, (Ready, Failed))
