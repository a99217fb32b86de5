from __future__ import annotations
import grp
import os
import pwd
from typing import List, Optional

from .models import Entry
from .utils import format_bytes, format_mtime

SIZE_WIDTH = 13
GROUP_WIDTH = 9
MTIME_WIDTH = 24  # time.ctime()

MAIL_HEADER = """\
#########
Subject:-
#########

Filesystem usage for {root} exceeds threshold on {host}

######
Body:-
######

Hi Guys,

     We have this alert on high filesystem usage for "{root}" on server "{host}". \
Upon investigation its found that below files/directories are taking up most of the space. \
Can you please try to clean up some of these files/directories so that the usage can get \
below threshold and any kind of space issue be avoided.
"""

MAIL_FOOTER = """\


Please be aware, that full filesystems can/will

- Continue to generate alerts
- Stop an application from functioning.
- Stop a server from functioning and lead to service outage.
"""


def owner_name(uid: int) -> str:
    # login name only, GECOS real names are not shown
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def render_table(entries: List[Entry]) -> str:
    users = [owner_name(e.uid) for e in entries]
    groups = [group_name(e.gid) for e in entries]
    name_w = max([len("Name")] + [len(e.path) for e in entries])
    user_w = max([len("User")] + [len(u) for u in users]) + 2
    group_w = max([GROUP_WIDTH] + [len(g) for g in groups])

    def row(name, size, user, group, mtime):
        return f"{name:<{name_w}}  {size:<{SIZE_WIDTH}} {user:<{user_w}} {group:<{group_w}} {mtime}".rstrip()

    rule = "=" * (name_w + 2 + SIZE_WIDTH + 1 + user_w + 1 + group_w + 1 + MTIME_WIDTH)
    lines = [rule, row("Name", "Size", "User", "Group", "Last Modified"), rule]
    for e, u, g in zip(entries, users, groups):
        lines.append(row(e.path, format_bytes(e.size), u, g, format_mtime(e.mtime)))
    return "\n".join(lines) + "\n"


def render_report(entries: List[Entry], root: str) -> str:
    out = ""
    if root.startswith("."):
        out += f"NOTE: All below files/directories are under {os.path.abspath(root)}\n"
    return out + render_table(entries)


def usage_line(info: Optional[dict]) -> str:
    if not info:
        return ""
    fstype = info["fstype"] or "unknown"
    return (f"Current usage of {info['mountpoint']} ({fstype}) is {info['percent']:.1f}% "
            f"({format_bytes(info['used'])} of {format_bytes(info['total'])}, "
            f"{format_bytes(info['free'])} free).\n")


def render_template(entries: List[Entry], root: str, host: str, fs_info: Optional[dict] = None) -> str:
    parts = [MAIL_HEADER.format(root=os.path.abspath(root), host=host)]
    usage = usage_line(fs_info)
    if usage:
        parts.append("\n" + usage)
    parts.append("\n\n")
    parts.append(render_report(entries, root))
    parts.append(MAIL_FOOTER)
    parts.append("\n")
    return "".join(parts)
