"""Configuration constants, settings objects, and .env loading.

WHY: Centralizes every configurable value (API endpoint, credentials,
polling cadence, sidecar naming, accepted audio formats) so it is easy
to find, update, and override. Settings are handed to the client and
poller as explicit objects rather than read from globals at call time,
which lets tests construct them directly.

HOW: python-dotenv loads the .env file on import. Defaults are plain
module-level constants. GladiaSettings and PollConfig are dataclasses
with from_env() constructors that read the environment when called.

RULES:
- API key is loaded from GLADIA_API_KEY (via .env or the process env), never hardcoded
- SUPPORTED_AUDIO_FORMATS lists accepted extensions (lowercase, with dot)
- Poll interval is fixed by default (backoff_factor 1.0), attempts unbounded
- All defaults can be overridden via environment variables
- An unset override means "use the default"; a set but invalid one
  (non-numeric, negative interval, attempts below 1) raises ConfigError
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from gladia_batch.errors import ConfigError

# Load .env from the working directory; existing env vars take precedence
load_dotenv()

# ---------------------------------------------------------------------------
# Supported audio file extensions
# ---------------------------------------------------------------------------

SUPPORTED_AUDIO_FORMATS: set[str] = {".mp3", ".wav", ".flac"}
"""Audio file extensions picked up by the directory scan (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# API and pipeline defaults
# ---------------------------------------------------------------------------

GLADIA_BASE_URL = os.getenv("GLADIA_BASE_URL", "https://api.gladia.io/v2")
DEFAULT_TIMEOUT_S = 300.0
DEFAULT_POLL_INTERVAL_S = 5.0
DEFAULT_SIDECAR_NAME = os.getenv("GLADIA_SIDECAR_NAME", "data.json")


def load_api_key() -> str:
    """Load the Gladia API key from the environment.

    RULES:
    - Raises ConfigError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("GLADIA_API_KEY", "").strip()
    if not key:
        raise ConfigError(
            "Gladia API key not configured. "
            "Set GLADIA_API_KEY in the environment or in a .env file."
        )
    return key


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return value


def _float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if not value >= 0:
        raise ConfigError(f"{name} cannot be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class GladiaSettings:
    """Connection settings for the Gladia API.

    WHY: The client used to depend on process-wide state for its key and
    base URL. Passing a settings object at construction makes the client
    self-contained and lets tests point it at a mock transport.

    RULES:
    - api_key is required and never logged
    - base_url has no trailing slash (normalized by the client)
    """

    api_key: str
    base_url: str = GLADIA_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> GladiaSettings:
        """Build settings from GLADIA_API_KEY and GLADIA_BASE_URL."""
        return cls(
            api_key=load_api_key(),
            base_url=os.getenv("GLADIA_BASE_URL", GLADIA_BASE_URL),
        )


@dataclass(frozen=True)
class PollConfig:
    """Polling cadence for a transcription job.

    WHY: A provider job either finishes or the operator kills the run, so
    the default is to wait forever at a fixed interval. Tests and cautious
    callers can cap the number of attempts instead.

    RULES:
    - interval_s: delay between status checks (seconds)
    - max_attempts: None means unbounded
    - backoff_factor: 1.0 keeps the interval fixed
    - max_interval_s: upper bound for the interval when backing off
    """

    interval_s: float = DEFAULT_POLL_INTERVAL_S
    max_attempts: Optional[int] = None
    backoff_factor: float = 1.0
    max_interval_s: float = 10.0

    @classmethod
    def from_env(cls) -> PollConfig:
        """Build a poll config from GLADIA_POLL_INTERVAL_S / GLADIA_MAX_POLL_ATTEMPTS."""
        interval = _float("GLADIA_POLL_INTERVAL_S", DEFAULT_POLL_INTERVAL_S)
        return cls(
            interval_s=interval,
            max_attempts=_optional_int("GLADIA_MAX_POLL_ATTEMPTS"),
            max_interval_s=max(interval, 10.0),
        )
