from __future__ import annotations
import heapq
import logging
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Working set never holds more than this many candidates between spills.
MAX_LIMIT = 100

RankKey = Callable[[Any], int]


def _size_of(value: Any) -> int:
    return getattr(value, "size", value)


class BoundedTopK:
    """Keeps the `count` largest values seen so far using bounded memory.

    Candidates go into a working set keyed by path. When the working set
    reaches `limit` entries it is spilled: merged into the current best
    `count`, re-ranked, truncated and cleared. Later values for the same key
    overwrite earlier ones.

    `rank` maps a value to its ranking key (defaults to `.size`, or the value
    itself for plain numbers).
    """

    def __init__(self, count: int, limit: int = MAX_LIMIT, rank: Optional[RankKey] = None):
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        if count >= limit:
            raise ValueError(f"count must be less than {limit}, got {count}")
        self.count = count
        self.limit = limit
        self.rank = rank or _size_of
        self._working: Dict[Hashable, Any] = {}
        self._best: Dict[Hashable, Any] = {}
        self.spills = 0

    def __len__(self) -> int:
        return len(self._best)

    @property
    def working_size(self) -> int:
        return len(self._working)

    def record(self, key: Hashable, value: Any) -> None:
        self._working[key] = value
        if len(self._working) >= self.limit:
            self.spill()

    def spill(self) -> None:
        merged = self._best
        merged.update(self._working)
        top = heapq.nlargest(self.count, merged.items(), key=lambda kv: self.rank(kv[1]))
        self._best = dict(top)
        self._working.clear()
        self.spills += 1
        logger.debug("spill #%d: kept %d of %d candidates", self.spills, len(self._best), len(merged))

    def finalize(self) -> List[Tuple[Hashable, Any]]:
        """Spill what is left and return (key, value) pairs, largest first."""
        self.spill()
        return sorted(self._best.items(), key=lambda kv: self.rank(kv[1]), reverse=True)
