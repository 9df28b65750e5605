"""Watch-set filtering for extracted entries.

Two filters are kept side by side because clients depend on each:

- ``watchlist``: slug-prefix match only (legacy clients)
- ``recent``: slug-prefix match, then upcoming or released within the last 24 hours
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .crawl.base import Entry
from .crawl.timeparse import hours_ago


RECENT_HOURS = 24.0

WATCH_ALL = "all"


class FilterMode(str, Enum):
    recent = "recent"
    watchlist = "watchlist"


def parse_watch_param(raw: Optional[str], default: Sequence[str]) -> Optional[List[str]]:
    """Turn the ``watch`` query value into a prefix list.

    Missing/blank -> ``default``; ``all`` -> None (no filtering); otherwise CSV.
    A value with no usable prefixes (e.g. ",,") also falls back to ``default``.
    """
    if raw is None or not raw.strip():
        return list(default)
    if raw.strip().lower() == WATCH_ALL:
        return None
    prefixes = [s.strip() for s in raw.split(",") if s.strip()]
    return prefixes or list(default)


def matches_watch(entry: Entry, watch: Iterable[str]) -> bool:
    slug = (entry.slug or "").lower()
    if not slug:
        return False
    return any(slug.startswith(w.lower()) for w in watch if w)


def is_recent(entry: Entry, max_age_hours: float = RECENT_HOURS) -> bool:
    """Released within ``max_age_hours``. Upcoming entries are not 'recent'."""
    if entry.is_upcoming:
        return False
    return hours_ago(entry.time) <= max_age_hours


def is_relevant(entry: Entry, watch: Iterable[str], max_age_hours: float = RECENT_HOURS) -> bool:
    if not matches_watch(entry, watch):
        return False
    if entry.is_upcoming:
        return True
    return hours_ago(entry.time) <= max_age_hours


def filter_by_watchlist(entries: Iterable[Entry], watch: Optional[Sequence[str]]) -> List[Entry]:
    if not watch:
        return list(entries)
    return [e for e in entries if matches_watch(e, watch)]


def filter_recent(
    entries: Iterable[Entry],
    watch: Sequence[str],
    max_age_hours: float = RECENT_HOURS,
) -> List[Entry]:
    return [e for e in entries if is_relevant(e, watch, max_age_hours)]


def apply_filter(
    entries: Iterable[Entry],
    watch: Optional[Sequence[str]],
    mode: FilterMode = FilterMode.recent,
) -> List[Entry]:
    """``watch=None`` means ``?watch=all``: everything, in either mode."""
    if watch is None:
        return list(entries)
    if mode == FilterMode.watchlist:
        return filter_by_watchlist(entries, watch)
    return filter_recent(entries, watch)
