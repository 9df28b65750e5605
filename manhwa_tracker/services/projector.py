"""Entry list -> public JSON shapes.

Verbose: full fields plus ok / fetchedAt / count.
Compact: capped list with short keys, for small embedded displays (ESP32).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence

from .crawl.base import Entry
from .filters import is_recent


COMPACT_TITLE_CHARS = 22
COMPACT_CHAPTER_CHARS = 20
COMPACT_MAX_LIMIT = 50


class UpcomingCode(str, Enum):
    binary = "binary"  # 1 upcoming, 0 otherwise
    tristate = "tristate"  # 1 upcoming, 2 released recently, 0 otherwise


def iso_timestamp(epoch_seconds: float) -> str:
    """Epoch seconds -> '2024-11-01T12:00:00.000Z'."""
    dt = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def upcoming_code(entry: Entry, scheme: UpcomingCode = UpcomingCode.binary) -> int:
    if entry.is_upcoming:
        return 1
    if scheme == UpcomingCode.tristate and is_recent(entry):
        return 2
    return 0


def project_verbose(entries: Iterable[Entry], fetched_at: float) -> Dict[str, Any]:
    updates = [e.to_dict() for e in entries]
    return {
        "ok": True,
        "fetchedAt": iso_timestamp(fetched_at),
        "count": len(updates),
        "updates": updates,
    }


def project_compact(
    entries: Sequence[Entry],
    limit: int,
    scheme: UpcomingCode = UpcomingCode.binary,
) -> Dict[str, Any]:
    limit = max(0, int(limit))
    items: List[Dict[str, Any]] = [
        {
            "t": e.title[:COMPACT_TITLE_CHARS],
            "c": e.chapter[:COMPACT_CHAPTER_CHARS],
            "tm": e.time,
            "u": upcoming_code(e, scheme),
        }
        for e in list(entries)[:limit]
    ]
    return {"ok": 1, "n": len(items), "d": items}


def verbose_error(message: str) -> Dict[str, Any]:
    return {"ok": False, "error": message}


def compact_error(message: str) -> Dict[str, Any]:
    return {"ok": 0, "e": message}
