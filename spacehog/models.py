from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Mode(Enum):
    FILES = "files"
    DIRECTORIES = "directories"


@dataclass
class Entry:
    path: str
    size: int
    mtime: float
    uid: int
    gid: int

    @classmethod
    def from_stat(cls, path: str, st, size: Optional[int] = None) -> "Entry":
        return cls(path=path,
                   size=int(st.st_size if size is None else size),
                   mtime=float(st.st_mtime),
                   uid=int(getattr(st, "st_uid", 0) or 0),
                   gid=int(getattr(st, "st_gid", 0) or 0))


@dataclass
class TimeWindow:
    """Open interval of accepted modification times. Both bounds are exclusive."""
    newer: float = 0.0
    older: float = math.inf

    def contains(self, mtime: float) -> bool:
        return self.newer < mtime < self.older


@dataclass
class ScanOptions:
    root: str
    mode: Mode
    just: bool = False
    size_threshold: int = 1024 * 1024
    count: int = 10
    window: TimeWindow = field(default_factory=TimeWindow)

    def accepts(self, size: int, mtime: float) -> bool:
        return size > self.size_threshold and self.window.contains(mtime)


@dataclass
class ScanResult:
    root: str
    mode: Mode
    entries: List[Entry]        # sorted desc by size
    files: int
    dirs: int
    bytes_scanned: int
    skipped: int
    pruned: int
    elapsed_sec: float
