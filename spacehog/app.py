from __future__ import annotations
import argparse
import logging
import socket
import sys
import time
from typing import List, Optional

from .models import Mode, ScanOptions, TimeWindow
from .report import render_report, render_template
from .scanner import NoSuchDirectory, scan
from .system import filesystem_info, lower_priority
from .topk import MAX_LIMIT
from .utils import format_bytes, newer_bound, older_bound

APP_NAME = "spacehog"

DEFAULT_COUNT = 10
DEFAULT_SIZE_THRESHOLD = 1024 * 1024

logger = logging.getLogger(APP_NAME)

EPILOG = f"""\
[-o] and [-n] take a duration in months, days or hours:
20m, 20d and 20h mean 20 months (of 30 days), 20 days and 20 hours.

The scan never crosses into another filesystem, like find -xdev.

examples:
  {APP_NAME} -f /export/home           10 largest files under /export/home
  {APP_NAME} -d /export/home           10 largest directories under /export/home
  {APP_NAME} -f /export/home -j        only files directly inside /export/home
  {APP_NAME} -f /export/home -c 50     50 largest files instead of 10
  {APP_NAME} -f /export/home -o 2m     only files last modified more than 2 months ago
  {APP_NAME} -f /export/home -n 2m     only files modified within the last 2 months
  {APP_NAME} -f /export/home -s 10000000
                                   only files larger than 10 MB (default 1 MB)
"""


class ColorFormatter(logging.Formatter):
    COLORS = {
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelno, "") if self.use_color else ""
        if color:
            message = f"{color}{message}{self.RESET}"
        return message


def configure_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter("%(levelname)s: %(message)s", use_color=sys.stderr.isatty()))
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


class UsageParser(argparse.ArgumentParser):
    """Every usage problem prints the help text and exits with status 1."""

    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(1, f"\n{self.prog}: error: {message}\n")


class HelpAction(argparse.Action):
    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        parser.exit(1)


def build_parser() -> UsageParser:
    p = UsageParser(
        prog=APP_NAME,
        description="Find the largest files or directories inside a filesystem.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    what = p.add_mutually_exclusive_group(required=True)
    what.add_argument("-d", "--directory", dest="mode", action="store_const", const=Mode.DIRECTORIES,
                      help="print the largest directories inside the filesystem")
    what.add_argument("-f", "--file", dest="mode", action="store_const", const=Mode.FILES,
                      help="print the largest files inside the filesystem")
    p.add_argument("-j", "--just", action="store_true",
                   help="only look at files directly inside the given directory (with -f)")
    p.add_argument("-s", "--size", type=int, default=DEFAULT_SIZE_THRESHOLD, metavar="BYTES",
                   help="only consider entries larger than BYTES (default: %(default)s)")
    p.add_argument("-c", "--count", type=int, default=DEFAULT_COUNT,
                   help=f"how many entries to print (default: %(default)s, less than {MAX_LIMIT})")
    p.add_argument("-t", "--template", action="store_true",
                   help="print a mail template for asking support to clean up")
    p.add_argument("-o", "--older", metavar="DURATION",
                   help="only entries modified before DURATION ago")
    p.add_argument("-n", "--newer", metavar="DURATION",
                   help="only entries modified within the last DURATION")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    p.add_argument("-h", "--help", action=HelpAction, help="show this help and exit")
    p.add_argument("root", help="directory to scan")
    return p


def parse_options(argv: Optional[List[str]] = None, now: Optional[float] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not 1 <= args.count < MAX_LIMIT:
        parser.error(f"--count must be between 1 and {MAX_LIMIT - 1}")
    if args.size < 0:
        parser.error("--size must not be negative")

    configure_logging(args.verbose)
    now = time.time() if now is None else now
    window = TimeWindow(newer=newer_bound(args.newer, now), older=older_bound(args.older, now))
    options = ScanOptions(
        root=args.root,
        mode=args.mode,
        just=args.just,
        size_threshold=args.size,
        count=args.count,
        window=window,
    )
    return options, args.template


def main(argv: Optional[List[str]] = None) -> int:
    options, template = parse_options(argv)
    lower_priority()

    try:
        result = scan(options)
    except NoSuchDirectory as exc:
        logger.critical("%s", exc)
        return 2

    logger.debug("scanned %d files in %d directories (%s) in %.2fs; %d skipped, %d pruned at mount points",
                 result.files, result.dirs, format_bytes(result.bytes_scanned),
                 result.elapsed_sec, result.skipped, result.pruned)

    if template:
        out = render_template(result.entries, options.root, socket.gethostname(),
                              filesystem_info(options.root))
    else:
        out = render_report(result.entries, options.root)
    sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
