"""Single-slot, time-bounded cache around the homepage fetch + extraction.

The origin is hit at most once per TTL window: a fresh slot is served without
I/O, a stale or empty slot is refreshed by the next caller. While a refresh is
in flight, other misses await that same task, so they share one origin request
and its outcome. A failed refresh leaves the previous slot in place and
re-raises to every caller that was waiting on it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Tuple

from .crawl.base import Entry


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0

Fetcher = Callable[[], Awaitable[List[Entry]]]


@dataclass(frozen=True)
class CacheSlot:
    entries: Tuple[Entry, ...]
    fetched_at: float  # wall clock, epoch seconds
    loaded_at: float  # monotonic clock, for TTL checks


class UpdateCache:
    def __init__(
        self,
        fetcher: Fetcher,
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._fetcher = fetcher
        self.ttl = float(ttl)
        self._clock = clock
        self._wall_clock = wall_clock
        self._slot: Optional[CacheSlot] = None
        self._inflight: Optional["asyncio.Future[CacheSlot]"] = None
        self.fetch_count = 0

    def peek(self) -> Optional[CacheSlot]:
        return self._slot

    def is_fresh(self, slot: Optional[CacheSlot] = None) -> bool:
        slot = slot if slot is not None else self._slot
        if slot is None:
            return False
        return self._clock() - slot.loaded_at < self.ttl

    async def get_entries(self) -> Tuple[Entry, ...]:
        slot = await self.get_slot()
        return slot.entries

    async def get_slot(self) -> CacheSlot:
        slot = self._slot
        if slot is not None and self.is_fresh(slot):
            return slot
        # Concurrent misses all await the same refresh and share its result or error.
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh())
        return await asyncio.shield(self._inflight)

    async def _refresh(self) -> CacheSlot:
        self.fetch_count += 1
        # Stamped at request time, before the origin round trip.
        fetched_at = self._wall_clock()
        loaded_at = self._clock()
        try:
            entries = await self._fetcher()
        except Exception as exc:
            logger.warning("Refresh failed, keeping previous batch (%s): %s", self._describe(), exc)
            raise
        finally:
            self._inflight = None
        slot = CacheSlot(entries=tuple(entries), fetched_at=fetched_at, loaded_at=loaded_at)
        self._slot = slot
        logger.info("Refreshed update cache: %d entries", len(slot.entries))
        return slot

    def _describe(self) -> str:
        if self._slot is None:
            return "cache empty"
        return f"{len(self._slot.entries)} cached entries"
