from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


UPCOMING_PREFIX = "public in"


def is_upcoming_text(time_text: str) -> bool:
    return (time_text or "").strip().lower().startswith(UPCOMING_PREFIX)


@dataclass(frozen=True)
class Entry:
    """Latest chapter of one series, as shown on the homepage."""

    title: str
    slug: str
    chapter: str
    time: str
    is_upcoming: bool

    @classmethod
    def build(cls, *, title: str, slug: str, chapter: str, time: str) -> "Entry":
        return cls(title=title, slug=slug, chapter=chapter, time=time, is_upcoming=is_upcoming_text(time))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "chapter": self.chapter,
            "time": self.time,
            "isUpcoming": self.is_upcoming,
        }
