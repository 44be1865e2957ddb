"""
Resilient puzzle loader.

Polls the puzzle service until it hands back a complete puzzle or the retry
budget runs out. Retries are awaited timers on the running event loop, so
only one request is ever in flight, and close() turns any pending retry into
a no-op.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

import requests
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .models import load_state
from .models.load_state import Failed, LoadState, Loading, Ready
from .models.puzzle import Puzzle

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 2.0
DEFAULT_MAX_ATTEMPTS = 20

# Malformed payloads (PuzzleNotReady), non-JSON bodies and transport errors
RETRYABLE = (ValueError, requests.RequestException)

Listener = Callable[[LoadState], None]


class LoaderClosed(RuntimeError):
    pass


class PuzzleLoader:
    """Owns the LoadState for one puzzle view."""

    def __init__(
        self,
        fetch: Callable[[], Puzzle],
        retry_delay: float = DEFAULT_RETRY_DELAY,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Args:
            fetch: Blocking callable issuing one request (e.g. PuzzleClient.fetch)
            retry_delay: Fixed delay between attempts, in seconds
            max_attempts: Maximum number of requests before giving up
            sleep: Awaitable sleep used between attempts (asyncio.sleep by default)
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        if retry_delay < 0:
            raise ValueError(f"retry_delay must not be negative, got {retry_delay}")

        self._fetch = fetch
        self.retry_delay = retry_delay
        self.max_attempts = max_attempts
        self._sleep = sleep or asyncio.sleep

        self.state: LoadState = load_state.begin()
        self.requests_made = 0
        self._listeners: List[Listener] = []
        self._task: Optional[asyncio.Task] = None
        self._in_flight: Optional[asyncio.Future] = None
        self._generation = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> None:
        """Call listener with every new state."""
        self._listeners.append(listener)

    def _transition(self, generation: int, new_state: LoadState) -> bool:
        # Stale runs (superseded by reload or torn down by close) must not write.
        if self._closed or generation != self._generation:
            return False
        self.state = new_state
        for listener in self._listeners:
            listener(new_state)
        return True

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _before_sleep(self, generation: int) -> Callable[[RetryCallState], None]:
        def callback(retry_state: RetryCallState) -> None:
            if not self._is_current(generation):
                return
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            logger.info(
                "Data not ready yet (%s), retrying in %.1fs (attempt %d/%d)",
                exc, self.retry_delay, retry_state.attempt_number, self.max_attempts,
            )
            self._transition(generation, load_state.retry(self.state, self.max_attempts))
        return callback

    async def _attempt(self) -> Puzzle:
        # A cancelled run's request may still be running in its worker thread.
        if self._in_flight is not None and not self._in_flight.done():
            await asyncio.wait([self._in_flight])
        self.requests_made += 1
        self._in_flight = asyncio.ensure_future(asyncio.to_thread(self._fetch))
        self._in_flight.add_done_callback(_consume_result)
        return await asyncio.shield(self._in_flight)

    async def load(self) -> LoadState:
        """
        Run a full load from Loading(attempt=0) to Ready or Failed.

        Joins the pending run if one was already started. Returns the final
        state.

        Raises:
            LoaderClosed: If the loader has been torn down
            asyncio.CancelledError: If the run is cancelled by close() or reload()
        """
        return await self.start()

    async def _run(self) -> LoadState:
        self._generation += 1
        generation = self._generation
        self._transition(generation, load_state.begin())

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(RETRYABLE),
            before_sleep=self._before_sleep(generation),
            sleep=self._sleep,
            reraise=True,
        )

        puzzle: Optional[Puzzle] = None
        try:
            async for attempt in retrying:
                if not self._is_current(generation):
                    return self.state
                with attempt:
                    puzzle = await self._attempt()
        except RETRYABLE as e:
            logger.warning(
                "Giving up after %d attempts, last error: %s", self.requests_made, e
            )
            if self._is_current(generation):
                self._transition(generation, load_state.fail(self.state))
            return self.state

        if puzzle is not None and self._is_current(generation):
            logger.info("Puzzle loaded after %d attempt(s)", self.requests_made)
            self._transition(generation, load_state.succeed(self.state, puzzle))
        return self.state

    def start(self) -> asyncio.Task:
        """Schedule a load on the running loop unless one is already pending."""
        if self._closed:
            raise LoaderClosed("Loader has been closed")
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def reload(self) -> asyncio.Task:
        """Manual restart: drop any pending run and start over from attempt 0."""
        self._cancel_pending()
        self.requests_made = 0
        return self.start()

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        # Invalidate any run that is still unwinding.
        self._generation += 1

    def close(self) -> None:
        """Tear down; pending retries become no-ops."""
        self._cancel_pending()
        self._closed = True

    def __repr__(self) -> str:
        return f"PuzzleLoader(state={self.state!r}, requests_made={self.requests_made})"


def is_ready(state: LoadState) -> bool:
    return isinstance(state, Ready)


def describe(state: LoadState) -> str:
    """Short human-readable summary of a state."""
    if isinstance(state, Loading):
        return state.message
    if isinstance(state, Ready):
        return f"Ready (after {state.attempt} retries)"
    if isinstance(state, Failed):
        return f"Error: {state.reason}"
    raise TypeError(f"Unknown load state: {state!r}")


def _consume_result(future: asyncio.Future) -> None:
    # Mark abandoned results as retrieved; the owning run may have been cancelled.
    if not future.cancelled():
        future.exception()
