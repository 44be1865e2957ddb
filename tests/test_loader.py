import asyncio
import threading
import time

import pytest
import requests

from letterboxed.loader import LoaderClosed, PuzzleLoader, describe, is_ready
from letterboxed.models.load_state import Failed, Loading, Ready
from letterboxed.models.puzzle import PuzzleNotReady, parse_puzzle


class FakeService:
    """Plays back a scripted sequence of payloads / exceptions."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    def fetch(self):
        self.calls += 1
        item = self.responses.pop(0) if self.responses else {}
        if isinstance(item, BaseException):
            raise item
        return parse_puzzle(item)


class RecordingSleep:
    def __init__(self, hook=None):
        self.delays = []
        self.hook = hook

    async def __call__(self, delay):
        self.delays.append(delay)
        if self.hook:
            self.hook()


def make_loader(service, sleep=None, **kwargs):
    return PuzzleLoader(service.fetch, sleep=sleep or RecordingSleep(), **kwargs)


def test_initial_state_is_loading_attempt_zero():
    loader = make_loader(FakeService([]))
    assert loader.state == Loading(attempt=0)
    assert describe(loader.state) == "Loading puzzle..."


def test_immediate_success(payload):
    service = FakeService([payload])
    loader = make_loader(service)
    state = asyncio.run(loader.load())
    assert isinstance(state, Ready)
    assert state.attempt == 0
    assert state.puzzle.square.top == "ABC"
    assert service.calls == 1


def test_three_malformed_then_valid(payload):
    malformed = {"square": {"right": "DEF"}, "nyt_solution": [], "lotta_solution": []}
    service = FakeService([malformed, malformed, malformed, payload])
    sleep = RecordingSleep()
    loader = make_loader(service, sleep=sleep, retry_delay=2.0, max_attempts=20)

    state = asyncio.run(loader.load())

    assert isinstance(state, Ready)
    assert state.attempt == 3
    assert service.calls == 4
    assert loader.requests_made == 4
    assert sleep.delays == [2.0, 2.0, 2.0]


def test_twenty_malformed_responses_time_out():
    service = FakeService([{"error": "still computing"}] * 25)
    sleep = RecordingSleep()
    loader = make_loader(service, sleep=sleep, max_attempts=20)

    state = asyncio.run(loader.load())

    assert isinstance(state, Failed)
    assert state.reason.lower().startswith("timed out")
    assert service.calls == 20
    # no sleep after the final attempt
    assert len(sleep.delays) == 19


def test_transport_errors_are_retried(payload):
    service = FakeService([
        requests.ConnectionError("refused"),
        ValueError("not json"),
        payload,
    ])
    loader = make_loader(service)
    state = asyncio.run(loader.load())
    assert isinstance(state, Ready)
    assert state.attempt == 2


def test_unexpected_errors_propagate():
    service = FakeService([KeyError("boom")])
    loader = make_loader(service)
    with pytest.raises(KeyError):
        asyncio.run(loader.load())
    assert service.calls == 1


def test_listeners_see_every_transition(payload):
    service = FakeService([{}, {"status": "loading"}, payload])
    loader = make_loader(service, max_attempts=5)
    seen = []
    loader.subscribe(seen.append)

    asyncio.run(loader.load())

    assert seen[0] == Loading(attempt=0)
    assert seen[1] == Loading(attempt=1, message="Loading puzzle... (Attempt 1/5)")
    assert seen[2] == Loading(attempt=2, message="Loading puzzle... (Attempt 2/5)")
    assert isinstance(seen[3], Ready)
    assert len(seen) == 4


def test_close_during_pending_retry_is_a_noop():
    service = FakeService([PuzzleNotReady("not yet")] * 5)

    async def scenario():
        loader = PuzzleLoader(service.fetch)
        loader._sleep = RecordingSleep(hook=loader.close)
        task = loader.start()
        with pytest.raises(asyncio.CancelledError):
            await task
        return loader

    loader = asyncio.run(scenario())

    # the retry timer fired after teardown: no new request, no state change
    assert service.calls == 1
    assert loader.state == Loading(attempt=1, message="Loading puzzle... (Attempt 1/20)")
    assert loader.closed
def test_load_after_close_raises():
    loader = make_loader(FakeService([]))
    loader.close()
    with pytest.raises(LoaderClosed):
        asyncio.run(loader.load())


def test_start_and_close_cancel_pending_task():
    service = FakeService([{}] * 5)

    async def scenario():
        loader = PuzzleLoader(service.fetch, retry_delay=60)
        task = loader.start()
        assert loader.start() is task
        while service.calls == 0:
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.01)
        loader.close()
        with pytest.raises(asyncio.CancelledError):
            await task
        return loader

    loader = asyncio.run(scenario())
    assert service.calls == 1
    assert isinstance(loader.state, Loading)


def test_reload_restarts_from_attempt_zero(payload):
    service = FakeService([{}] * 3)

    async def scenario():
        loader = PuzzleLoader(service.fetch, max_attempts=3, sleep=RecordingSleep())
        first = await loader.start()
        assert isinstance(first, Failed)

        service.responses = [{}, payload]
        seen = []
        loader.subscribe(seen.append)
        second = await loader.reload()
        return loader, seen, second

    loader, seen, state = asyncio.run(scenario())
    assert seen[0] == Loading(attempt=0)
    assert isinstance(state, Ready)
    assert state.attempt == 1
    assert loader.requests_made == 2


@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"retry_delay": -1}])
def test_invalid_policy(kwargs):
    with pytest.raises(ValueError):
        PuzzleLoader(lambda: None, **kwargs)


def test_describe_and_is_ready(puzzle):
    assert describe(Failed("timed out")) == "Error: timed out"
    assert describe(Ready(puzzle, attempt=2)) == "Ready (after 2 retries)"
    assert is_ready(Ready(puzzle))
    assert not is_ready(Loading())


class SlowService:
    """Blocking fetch that records how many requests overlap."""

    def __init__(self, payload, failures=0, delay=0.05):
        self.payload = payload
        self.failures = failures
        self.delay = delay
        self.calls = 0
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def fetch(self):
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            call = self.calls
        try:
            time.sleep(self.delay)
            if call <= self.failures:
                raise PuzzleNotReady("still computing")
            return parse_puzzle(self.payload)
        finally:
            with self._lock:
                self.in_flight -= 1


def test_load_joins_pending_run(payload):
    service = SlowService(payload)

    async def scenario():
        loader = PuzzleLoader(service.fetch, retry_delay=0)
        task = loader.start()
        await asyncio.sleep(0)
        state = await loader.load()
        assert state is await task
        return state

    state = asyncio.run(scenario())
    assert isinstance(state, Ready)
    assert service.calls == 1
    assert service.peak == 1


def test_reload_waits_for_abandoned_request(payload):
    service = SlowService(payload, failures=1)

    async def scenario():
        loader = PuzzleLoader(service.fetch, retry_delay=0)
        loader.start()
        while service.calls == 0:
            await asyncio.sleep(0.001)
        # first request is still blocking in its worker thread
        return await loader.reload()

    state = asyncio.run(scenario())
    assert isinstance(state, Ready)
    assert service.calls == 2
    assert service.peak == 1


def test_empty_solution_list_loads_first_time(payload):
    payload["lotta_solution"] = []
    service = FakeService([payload])
    state = asyncio.run(make_loader(service).load())
    assert isinstance(state, Ready)
    assert service.calls == 1
