# letterboxed/core/env.py
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from ..layout import DEFAULT_PADDING
from ..loader import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from ..models.api_client import DEFAULT_ENDPOINT

KNOWN_KEYS = [
    "LETTERBOXED_API_URL",
    "LETTERBOXED_RETRY_DELAY",
    "LETTERBOXED_MAX_ATTEMPTS",
    "LETTERBOXED_PADDING",
    "LETTERBOXED_REQUEST_TIMEOUT",
]


@dataclass(frozen=True)
class Settings:
    endpoint: str = DEFAULT_ENDPOINT
    retry_delay: float = DEFAULT_RETRY_DELAY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    padding: float = DEFAULT_PADDING
    request_timeout: Optional[float] = None


def load_env(dotenv_path: str | None = None) -> dict[str, str]:
    """
    Load .env once. Returns a dict of which keys are present (masked).
    """
    load_dotenv(dotenv_path or os.getenv("DOTENV_PATH", ".env"), override=False)
    found = {}
    for k in KNOWN_KEYS:
        v = os.getenv(k)
        if v:
            mask = v[:4] + "…" if len(v) > 4 else "…"
            found[k] = mask
    return found


def _number(key: str, cast, default):
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def load_settings(dotenv_path: str | None = None) -> Settings:
    """Build Settings from the environment (after loading .env)."""
    load_env(dotenv_path)
    return Settings(
        endpoint=os.getenv("LETTERBOXED_API_URL") or DEFAULT_ENDPOINT,
        retry_delay=_number("LETTERBOXED_RETRY_DELAY", float, DEFAULT_RETRY_DELAY),
        max_attempts=_number("LETTERBOXED_MAX_ATTEMPTS", int, DEFAULT_MAX_ATTEMPTS),
        padding=_number("LETTERBOXED_PADDING", float, DEFAULT_PADDING),
        request_timeout=_number("LETTERBOXED_REQUEST_TIMEOUT", float, None),
    )
