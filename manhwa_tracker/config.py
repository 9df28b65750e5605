"""Environment-driven settings.

All knobs are read from environment variables once, on first use:

- PORT / HOST: listen address for ``python -m manhwa_tracker`` (default 0.0.0.0:3000)
- LOG_LEVEL: root log level (default INFO)
- ASURA_URL: page to scrape (default https://asuracomic.net/)
- WATCHLIST: comma-separated default slug prefixes
- CACHE_TTL_SECONDS: lifetime of a fetched batch (default 300)
- FETCH_TIMEOUT_SECONDS / FETCH_RETRIES / FETCH_RETRY_BACKOFF_SECONDS: origin fetch policy
- FILTER_MODE: default filter for /updates endpoints, "recent" or "watchlist"
- COMPACT_CODE: default upcoming code for the compact shape, "binary" or "tristate"
- COMPACT_LIMIT: default number of entries in the compact shape
- DEBUG_ENDPOINT: set to 1 to expose GET /debug
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from manhwa_tracker.services.filters import FilterMode
from manhwa_tracker.services.projector import UpcomingCode


DEFAULT_WATCHLIST: Tuple[str, ...] = (
    "i-killed-an-academy-player",
    "the-player-hides-his-past",
    "nano-machine",
    "solo-leveling",
    "omniscient-readers-viewpoint",
)


def _split_csv(raw: str) -> Tuple[str, ...]:
    return tuple(s.strip() for s in raw.split(",") if s.strip())


def _parse_choice(enum_cls, value, name: str):
    try:
        return enum_cls(str(getattr(value, "value", value)).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"{name} must be one of: {choices} (got {value!r})") from None


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    asura_url: str = "https://asuracomic.net/"
    watchlist: Tuple[str, ...] = field(default=DEFAULT_WATCHLIST)
    cache_ttl_seconds: float = 300.0
    fetch_timeout_seconds: float = 15.0
    fetch_retries: int = 2
    fetch_retry_backoff_seconds: float = 0.5
    filter_mode: FilterMode = FilterMode.recent
    compact_code: UpcomingCode = UpcomingCode.binary
    compact_limit: int = 8
    debug_endpoint: bool = False

    def __post_init__(self) -> None:
        # Bad mode names fail here, at startup, not inside every request.
        object.__setattr__(self, "filter_mode", _parse_choice(FilterMode, self.filter_mode, "FILTER_MODE"))
        object.__setattr__(self, "compact_code", _parse_choice(UpcomingCode, self.compact_code, "COMPACT_CODE"))

    @classmethod
    def from_env(cls) -> "Settings":
        watch_raw = os.getenv("WATCHLIST")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            asura_url=os.getenv("ASURA_URL", "https://asuracomic.net/"),
            watchlist=_split_csv(watch_raw) if watch_raw else DEFAULT_WATCHLIST,
            cache_ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", "300")),
            fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT_SECONDS", "15")),
            fetch_retries=int(os.getenv("FETCH_RETRIES", "2")),
            fetch_retry_backoff_seconds=float(os.getenv("FETCH_RETRY_BACKOFF_SECONDS", "0.5")),
            filter_mode=os.getenv("FILTER_MODE", "recent").lower(),
            compact_code=os.getenv("COMPACT_CODE", "binary").lower(),
            compact_limit=int(os.getenv("COMPACT_LIMIT", "8")),
            debug_endpoint=os.getenv("DEBUG_ENDPOINT", "0") == "1",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
