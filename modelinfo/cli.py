"""
Command-line entry point.

Usage:
    modelinfo path/to/model.glb [more files or folders ...] [--suffix .info.txt] [--no-pause] [--verbose]

Every recognized file gets a sibling ``<file><suffix>`` report. Folders are
scanned recursively; unrecognized files inside them are skipped silently.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .batch import REPORT_SUFFIX, BatchProcessor
from .diagnostics import Diagnostics
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="modelinfo", description="Write a human-readable info report next to each model file.")
    p.add_argument("paths", nargs="+", help="Model files or folders to scan recursively")
    p.add_argument("--suffix", default=REPORT_SUFFIX, help=f"Report file suffix (default: {REPORT_SUFFIX})")
    p.add_argument("--no-pause", action="store_true", help="Never wait for Enter after warnings or errors")
    p.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    p.add_argument("--log-file", help="Also write the log to this file")
    return p


def interactive() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def pause() -> None:
    try:
        input("Press Enter to exit...")
    except EOFError:
        pass


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    diagnostics = Diagnostics()
    processor = BatchProcessor(diagnostics, suffix=args.suffix)
    for arg in args.paths:
        processor.process(arg)

    print("Finished.")
    if diagnostics.should_pause and not args.no_pause and interactive():
        pause()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
