from __future__ import annotations
import logging
import math
import re
import time
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

HOUR = 3600
DAY = 24 * HOUR
MONTH = 30 * DAY  # months are a flat 30 days

UNIT_SECONDS = {"m": MONTH, "d": DAY, "h": HOUR}

_DURATION_RE = re.compile(r"(\d+)([mdh])")


@dataclass(frozen=True)
class Duration:
    count: int
    unit: str  # one of "m", "d", "h"

    @property
    def seconds(self) -> int:
        return self.count * UNIT_SECONDS[self.unit]


def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} PB"


def format_mtime(ts: float) -> str:
    return time.ctime(ts)


def parse_duration(text: Optional[str]) -> Optional[Duration]:
    """Parse `20m`, `20d` or `20h` (months, days, hours).

    Only the leading `<digits><unit>` is looked at, so `3days` reads as three
    days. Returns None when the text does not start that way.
    """
    if not text:
        return None
    m = _DURATION_RE.match(text.strip())
    if not m:
        return None
    return Duration(int(m.group(1)), m.group(2))


def duration_bound(duration: Optional[Duration], now: float, default: float) -> float:
    """Absolute timestamp `now - duration`, or `default` when there is none."""
    if duration is None:
        return default
    return now - duration.seconds


def newer_bound(text: Optional[str], now: float) -> float:
    return _bound("newer", text, now, 0.0)


def older_bound(text: Optional[str], now: float) -> float:
    return _bound("older", text, now, math.inf)


def _bound(name: str, text: Optional[str], now: float, default: float) -> float:
    if text is None:
        return default
    d = parse_duration(text)
    if d is None:
        logger.warning("Invalid --%s value %r, expected <N>m, <N>d or <N>h. Not filtering on it.", name, text)
    return duration_bound(d, now, default)
