from __future__ import annotations
import logging
import os
import stat as statmod
import time
from typing import Callable, Iterator, List, NamedTuple, Optional

from .models import Entry, Mode, ScanOptions, ScanResult
from .topk import BoundedTopK

logger = logging.getLogger(__name__)

StatFn = Callable[[str], os.stat_result]


class NoSuchDirectory(Exception):
    def __init__(self, path: str):
        super().__init__(f"{path}: No such directory exists")
        self.path = path


class WalkItem(NamedTuple):
    path: str
    dirpath: str
    st: os.stat_result


class Walker:
    """Lazily yields the regular files under `root` without leaving its device.

    Every regular file of a directory is yielded before any of its
    subdirectories are entered. Entries that live on another device are
    neither yielded nor descended into. Unreadable entries and directories are
    skipped. With `recursive=False` only the direct children of `root` are
    looked at.
    """

    def __init__(self, root: str, recursive: bool = True, stat_fn: StatFn = os.lstat):
        self.root = root
        self.recursive = recursive
        self.stat_fn = stat_fn
        self.device: Optional[int] = None
        self.files = 0
        self.dirs = 0
        self.bytes_scanned = 0
        self.skipped = 0
        self.pruned = 0

    def __iter__(self) -> Iterator[WalkItem]:
        self.device = os.stat(self.root).st_dev
        self.dirs += 1
        stack = [self.root]
        while stack:
            dir_path = stack.pop()
            subdirs: List[str] = []
            yield from self._scan_dir(dir_path, subdirs)
            self.dirs += len(subdirs)
            # reversed so subdirectories come off the stack in listing order
            stack.extend(reversed(subdirs))

    def _scan_dir(self, dir_path: str, subdirs: List[str]) -> Iterator[WalkItem]:
        try:
            with os.scandir(dir_path) as it:
                for entry in it:
                    try:
                        st = self.stat_fn(entry.path)
                    except OSError as exc:
                        self.skipped += 1
                        logger.debug("skip %s: %s", entry.path, exc)
                        continue

                    if st.st_dev != self.device:
                        self.pruned += 1
                        logger.debug("prune %s: other filesystem", entry.path)
                        continue

                    mode = st.st_mode
                    if statmod.S_ISDIR(mode):
                        if self.recursive:
                            subdirs.append(entry.path)
                    elif statmod.S_ISREG(mode):
                        self.files += 1
                        self.bytes_scanned += st.st_size
                        yield WalkItem(entry.path, dir_path, st)
        except OSError as exc:
            self.skipped += 1
            logger.debug("skip directory %s: %s", dir_path, exc)


def scan_files(options: ScanOptions, walker: Walker) -> List[Entry]:
    top = BoundedTopK(options.count)
    for item in walker:
        st = item.st
        if options.accepts(st.st_size, st.st_mtime):
            top.record(item.path, Entry.from_stat(item.path, st))
    return [e for _, e in top.finalize()]


def directory_totals(walker: Walker, count: int) -> BoundedTopK:
    """Sum file sizes per immediate parent directory, keeping the `count` largest.

    Relies on the walker yielding a directory's files contiguously, so each
    total is complete before it is recorded.
    """
    totals = BoundedTopK(count)
    current: Optional[str] = None
    running = 0
    for item in walker:
        if item.dirpath != current:
            if current is not None:
                totals.record(current, running)
            current, running = item.dirpath, 0
        running += item.st.st_size
    if current is not None:
        totals.record(current, running)
    return totals


def scan_directories(options: ScanOptions, walker: Walker) -> List[Entry]:
    totals = directory_totals(walker, options.count)
    top = BoundedTopK(options.count)
    for path, total in totals.finalize():
        try:
            st = walker.stat_fn(path)
        except OSError as exc:
            walker.skipped += 1
            logger.debug("skip directory %s: %s", path, exc)
            continue
        if options.accepts(total, st.st_mtime):
            top.record(path, Entry.from_stat(path, st, size=total))
    return [e for _, e in top.finalize()]


def scan(options: ScanOptions, stat_fn: StatFn = os.lstat) -> ScanResult:
    if not os.path.isdir(options.root):
        raise NoSuchDirectory(options.root)

    t0 = time.time()
    if options.mode is Mode.FILES:
        walker = Walker(options.root, recursive=not options.just, stat_fn=stat_fn)
        entries = scan_files(options, walker)
    else:
        walker = Walker(options.root, recursive=True, stat_fn=stat_fn)
        entries = scan_directories(options, walker)

    return ScanResult(
        root=options.root,
        mode=options.mode,
        entries=entries,
        files=walker.files,
        dirs=walker.dirs,
        bytes_scanned=walker.bytes_scanned,
        skipped=walker.skipped,
        pruned=walker.pruned,
        elapsed_sec=time.time() - t0,
    )
