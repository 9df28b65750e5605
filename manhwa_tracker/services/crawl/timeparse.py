from __future__ import annotations

import math
import re


_AGO_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(minute|hour|day)", re.IGNORECASE)


def hours_ago(time_text: str) -> float:
    """Convert '3 hours ago' / '90 minutes ago' / '2 days ago' to hours.

    Returns math.inf for anything else, including 'Public in ...' text;
    upcoming entries must be checked before calling this.
    """
    m = _AGO_RE.match(time_text or "")
    if not m:
        return math.inf
    value = float(m.group(1))
    unit = m.group(2).lower()
    if unit == "minute":
        return value / 60.0
    if unit == "day":
        return value * 24.0
    return value
