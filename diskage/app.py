from __future__ import annotations
import argparse
import logging
import sys
from typing import Iterable, Optional

from . import __version__
from .drives import filesystem_for
from .errors import DiskAgeError
from .models import ScanContext
from .report import print_report
from .scanner import run_scan
from .utils import days_label, format_bytes, parse_units

APP_NAME = "diskage"

DEFAULT_ATIME_DAYS = 45
DEFAULT_MAX_DEPTH = 2
DEFAULT_UNITS = "GB"

logger = logging.getLogger(APP_NAME)

def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text}")
    return value

def _units(text: str) -> str:
    try:
        return parse_units(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Report how much data under a directory has not been accessed recently.",
    )
    parser.add_argument("directory", help="the directory to report on")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose mode")
    parser.add_argument("-a", "--atime", type=_non_negative_int, default=DEFAULT_ATIME_DAYS,
                        help="last access time in days, 0 keeps the default (default: %(default)s)")
    parser.add_argument("-m", "--maxdepth", type=_non_negative_int, default=DEFAULT_MAX_DEPTH,
                        help="maximum depth to report on (default: %(default)s)")
    parser.add_argument("-u", "--units", type=_units, default=DEFAULT_UNITS,
                        help="the units to report in: k|M|G|T|P|E (default: %(default)s)")
    parser.add_argument("-c", "--cost", type=float, default=0.0,
                        help="cost per unit per day; reports retention cost instead of size")
    return parser

def _setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root = logging.getLogger(APP_NAME)
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _setup_logging(args.verbose)

    try:
        ctx = ScanContext.from_days(root=args.directory,
                                    days=args.atime or DEFAULT_ATIME_DAYS,
                                    max_depth=args.maxdepth,
                                    unit=args.units,
                                    cost_rate=args.cost)
    except ValueError as e:
        parser.error(str(e))

    if args.verbose:
        fs = filesystem_for(ctx.root)
        if fs is not None:
            logger.debug("%s is on %s (%s) mounted at %s",
                         ctx.root, fs["device"], fs["fstype"], fs["mountpoint"])
        logger.debug("cutoff %d %s, max depth %d, units %s",
                     ctx.atime_days, days_label(ctx.atime_days),
                     ctx.max_depth, ctx.unit)

    try:
        store, _stats = run_scan(ctx)
    except DiskAgeError as e:
        logger.error("%s", e)
        return 1

    logger.debug("%s scanned, %s not accessed for %d days",
                 format_bytes(store.total_bytes), format_bytes(store.stale_bytes),
                 ctx.atime_days)
    print_report(store, ctx)
    return 0
