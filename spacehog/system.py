from __future__ import annotations
import logging
import os
from typing import Optional

import psutil

logger = logging.getLogger(__name__)

NICE_LOWEST = 19


def lower_priority() -> bool:
    """Drop this process to the lowest scheduling priority so busy hosts keep serving."""
    try:
        proc = psutil.Process()
        if psutil.WINDOWS:
            proc.nice(psutil.IDLE_PRIORITY_CLASS)
        else:
            proc.nice(NICE_LOWEST)
    except (psutil.Error, OSError) as exc:
        logger.debug("could not lower priority: %s", exc)
        return False
    return True


def mountpoint_of(path: str):
    """The partition whose mount point is the longest prefix of `path`."""
    path = os.path.abspath(path)
    best = None
    for p in psutil.disk_partitions(all=True):
        mp = p.mountpoint
        if not mp:
            continue
        prefix = mp.rstrip("\\/") + os.sep
        if path != mp and not path.startswith(prefix):
            continue
        if best is None or len(mp) > len(best.mountpoint):
            best = p
    return best


def filesystem_info(path: str) -> Optional[dict]:
    try:
        u = psutil.disk_usage(path)
        part = mountpoint_of(path)
    except (psutil.Error, OSError) as exc:
        logger.debug("no filesystem usage for %s: %s", path, exc)
        return None
    return {
        "mountpoint": part.mountpoint if part else os.path.abspath(path),
        "fstype": part.fstype if part else "",
        "total": int(u.total),
        "used": int(u.used),
        "free": int(u.free),
        "percent": float(u.percent),
    }
