"""Main CLI entry point for dst800cal."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..exceptions import Dst800Error
from .analyze import analyze_capture, dry_run, show_curve


def main() -> int:
    """Main entry point for the dst800cal CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="dst800cal: Airmar DST800 calibration over NMEA 2000",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dst800cal --dry-run options.json      Show the commands pending options would send
  dst800cal --parse-curve curve.txt     Validate an STW calibration curve
  dst800cal --analyze capture.jsonl     Summarize captured DST800 traffic
  dst800cal --version                   Show version
        """,
    )

    parser.add_argument(
        "--dry-run",
        metavar="OPTIONS",
        type=str,
        help="Print the raw messages the pending work in an options file would send",
    )

    parser.add_argument(
        "--parse-curve",
        metavar="FILE",
        type=str,
        help="Validate STW calibration curve text and show the encoded values",
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Classify a capture of decoded bus messages (one JSON object per line)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"dst800cal {__version__}",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = [
        (args.dry_run, dry_run),
        (args.parse_curve, show_curve),
        (args.analyze, analyze_capture),
    ]
    for target, command in commands:
        if not target:
            continue

        file_path = Path(target)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            command(file_path)
            return 0
        except (Dst800Error, OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
