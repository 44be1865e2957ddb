from __future__ import annotations
import logging
from typing import Any, Optional

import orjson
import requests

from .puzzle import Puzzle, parse_puzzle

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:5000"
PUZZLE_PATH = "/api/puzzle"


class PuzzleClient:
    """Client for the puzzle-data service."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: Optional[float] = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the puzzle client.

        Args:
            endpoint: Service base URL (defaults to the local dev server)
            timeout: Per-request timeout in seconds (None waits indefinitely)
            session: Optional requests session to reuse
        """
        self.endpoint = (endpoint or DEFAULT_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return self.endpoint + PUZZLE_PATH

    def fetch_raw(self) -> Any:
        """
        Issue a single GET and decode the JSON body.

        Raises:
            requests.RequestException: On connection failure or HTTP error status
            orjson.JSONDecodeError: If the body is not JSON (a ValueError)
        """
        response = self.session.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        data = orjson.loads(response.content)
        logger.debug("API response: %s", data)
        return data

    def fetch(self) -> Puzzle:
        """
        Fetch and validate one puzzle.

        Raises:
            PuzzleNotReady: If the payload is incomplete or still computing
            requests.RequestException: On transport failure
            ValueError: If the body is not JSON
        """
        return parse_puzzle(self.fetch_raw())

    def close(self) -> None:
        self.session.close()
