"""Capture analysis and dry-run CLI commands."""

from __future__ import annotations

import asyncio
import json
from collections import Counter
from pathlib import Path

from ..bus.config import SessionConfig
from ..bus.mock import MockBusDriver
from ..codec.curve import parse_stw_calibration_string
from ..codec.decoder import decode_inbound
from ..codec.schema import STW_FREQUENCY, STW_SPEED
from ..exceptions import DecodeError
from ..models.inbound import AirmarProprietary, GroupFunction
from ..session import CalibrationSession
from ..store import CalibrationStore, JsonFileBackend, MemoryBackend


def analyze_capture(file_path: Path) -> None:
    """Classify every message in a capture of JSON lines and print a summary.

    Lines that are blank or not JSON objects are counted as skipped.

    Args:
        file_path: Path to a file with one decoded bus message per line
    """
    counts: Counter[str] = Counter()
    skipped = 0

    for line in file_path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        try:
            message = decode_inbound(json.loads(line))
        except (json.JSONDecodeError, DecodeError):
            skipped += 1
            continue

        if message is None:
            counts["other"] += 1
        elif isinstance(message, GroupFunction):
            counts[f"{message.pgn} {message.function_code} PGN {message.commanded_pgn}"] += 1
        elif isinstance(message, AirmarProprietary):
            counts[f"{message.pgn} {message.proprietary_id}"] += 1
        else:
            counts[f"{message.pgn} {type(message).__name__}"] += 1

    total = sum(counts.values())
    print(f"{total} message{'s' if total != 1 else ''} classified, {skipped} skipped.")
    for label, count in sorted(counts.items()):
        print(f"  {count:6d}  {label}")


def show_curve(file_path: Path) -> None:
    """Validate STW curve text and print the values that would be sent.

    Raises:
        CalibrationParseError: If the curve text is malformed
    """
    points = parse_stw_calibration_string(file_path.read_text(encoding="utf-8"))
    print(f"{len(points)} data point{'s' if len(points) != 1 else ''}.")
    print(f"{'Hz':>10} {'m/s':>10} {'0.1 Hz':>8} {'cm/s':>8}")
    for point in points:
        print(
            f"{point.frequency_hz:>10g} {point.speed_mps:>10g} "
            f"{STW_FREQUENCY.scaled(point.frequency_hz):>8d} {STW_SPEED.scaled(point.speed_mps):>8d}"
        )


def dry_run(options_path: Path) -> list[str]:
    """Run the pending work in an options file without touching the bus or the file.

    Returns:
        The raw lines that would have been sent, in order
    """
    options = JsonFileBackend(options_path).load()
    store = CalibrationStore(MemoryBackend(options))
    bus = MockBusDriver()
    session = CalibrationSession(bus, store, SessionConfig(settle_delay=0.0))

    asyncio.run(session.start())
    session.stop()

    for line in bus.sent:
        print(line)
    return bus.sent
