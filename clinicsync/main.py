#!/usr/bin/env python3
"""ClinicSync entry point.

The sync engine is a library used by the booking application. This entry
point hosts the development remote document server.

Usage:
    python -m clinicsync.main serve [--port 8080] [--data-file doc.json]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    from clinicsync import __version__
    from clinicsync.web import add_serve_subparser

    parser = argparse.ArgumentParser(
        prog="clinicsync",
        description="ClinicSync remote document server",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")
    add_serve_subparser(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        from clinicsync.web import run_server
        return run_server(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
