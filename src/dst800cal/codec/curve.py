"""Text format for the speed-through-water calibration curve.

Operators enter the curve as rows of space-delimited pairs of pulse rate (Hz)
and STW (m/s), one data point per row::

    2.5 0.5
    10 2.06
    20 4.1

Points are kept in the order given; the device interpolates between them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from ..exceptions import CalibrationParseError


class CurvePoint(NamedTuple):
    """One calibration data point."""

    frequency_hz: float
    speed_mps: float


def parse_stw_calibration_string(text: str) -> list[CurvePoint]:
    """Parse curve text into an ordered list of points.

    Blank lines are skipped. Every other line must hold exactly two numeric
    tokens; the first bad line fails the whole parse.

    Args:
        text: Curve text as entered by the operator

    Returns:
        Points in input order

    Raises:
        CalibrationParseError: If a line is malformed or there are no points

    Example:
        >>> parse_stw_calibration_string("1.0 2.0\\n3.0 4.0")
        [CurvePoint(frequency_hz=1.0, speed_mps=2.0), CurvePoint(frequency_hz=3.0, speed_mps=4.0)]
    """
    points: list[CurvePoint] = []
    for row in text.strip().split("\n"):
        line = row.strip()
        if not line:
            continue

        words = line.split()
        if len(words) != 2:
            raise CalibrationParseError(
                f"Must have exactly two values on a row: {line}", line=line
            )
        try:
            frequency, speed = (float(word) for word in words)
        except ValueError as e:
            raise CalibrationParseError(
                f"Values must be numeric on a row: {line}", line=line
            ) from e
        points.append(CurvePoint(frequency, speed))

    if not points:
        raise CalibrationParseError("Calibration curve has no data points")

    return points


def _format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def stw_curve_to_string(points: Iterable[tuple[float, float]]) -> str:
    """Render points as newline-delimited ``"freq speed"`` rows."""
    return "\n".join(f"{_format_number(f)} {_format_number(s)}" for f, s in points)
