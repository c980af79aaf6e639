"""Calibration state, mirroring the host's persisted options object.

Field names match the option keys the host stores (``instance``,
``depth_offset.request_value``, ...), so the state loads from and saves back to
the same document. The ``request_value`` / ``set_value`` / ``restore_defaults``
flags are pending work picked up by the session at start.

Values are kept exactly as the host stored them (the temperature offset is a
string in the host's schema, the depth offset a number) and only converted
when an operation needs them. A bad value then fails that one operation
instead of the whole load.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..codec.curve import CurvePoint, parse_stw_calibration_string, stw_curve_to_string

OptionValue = str | int | float | None

DEFAULT_PULSE_INTERVAL = 2.0


def to_number(value: OptionValue, name: str) -> float | None:
    """Convert a stored option value to a float.

    Args:
        value: Value as persisted by the host
        name: Option name used in the error message

    Returns:
        The number, or None if the value is unset or blank

    Raises:
        ValueError: If the value is not a finite number

    Example:
        >>> to_number(" 0.5 ", "temperature_offset.value")
        0.5
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except ValueError as e:
        raise ValueError(f"{name} is not a number: {value!r}") from e
    if not math.isfinite(number):
        raise ValueError(f"{name} is not a finite number: {value!r}")
    return number


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow", validate_assignment=True)


class DepthOffset(_Section):
    """Transducer offset from the water surface (positive) or keel (negative), in meters."""

    request_value: bool = False
    set_value: bool = False
    value: OptionValue = None

    @property
    def meters(self) -> float | None:
        """``value`` as a number, None if unset.

        Raises:
            ValueError: If the value is not numeric
        """
        return to_number(self.value, "depth_offset.value")


class SpeedPulseReporting(_Section):
    """Speed pulse count reporting, used while calibrating STW."""

    enable: bool = False
    interval: OptionValue = DEFAULT_PULSE_INTERVAL

    @property
    def seconds(self) -> float:
        """Transmission interval in seconds, 2.0 if unset.

        Raises:
            ValueError: If the interval is not a positive number
        """
        seconds = to_number(self.interval, "speed_pulse_count.interval")
        if seconds is None:
            return DEFAULT_PULSE_INTERVAL
        if seconds <= 0:
            raise ValueError(f"speed_pulse_count.interval must be positive, got {self.interval!r}")
        return seconds


class SpeedThroughWater(_Section):
    """Piecewise linear STW calibration curve, stored as operator text."""

    request_value: bool = False
    restore_defaults: bool = False
    set_value: bool = False
    value: str | None = None

    @property
    def curve(self) -> list[CurvePoint]:
        """Parse ``value`` into points.

        Raises:
            CalibrationParseError: If the text is missing or malformed
        """
        return parse_stw_calibration_string(self.value or "")

    def set_curve(self, points: Iterable[tuple[float, float]]) -> None:
        self.value = stw_curve_to_string(points)


class TemperatureOffset(_Section):
    """Offset added to the water temperature reading, in K."""

    request_value: bool = False
    set_value: bool = False
    value: OptionValue = None

    @property
    def kelvin(self) -> float | None:
        """``value`` as a number, None if unset or blank.

        Raises:
            ValueError: If the value is not numeric
        """
        return to_number(self.value, "temperature_offset.value")


class CalibrationState(BaseModel):
    """Everything the session and reconciler read and mutate.

    Example:
        >>> state = CalibrationState.from_options(
        ...     {"instance": 35, "depth_offset": {"set_value": True, "value": -1.5}}
        ... )
        >>> state.depth_offset.value
        -1.5
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    instance: int | None = Field(default=None, ge=0, le=255)
    depth_offset: DepthOffset = Field(default_factory=DepthOffset)
    speed_pulse_count: SpeedPulseReporting = Field(default_factory=SpeedPulseReporting)
    speed_through_water: SpeedThroughWater = Field(default_factory=SpeedThroughWater)
    temperature_offset: TemperatureOffset = Field(default_factory=TemperatureOffset)

    @property
    def device_address(self) -> int | None:
        return self.instance

    @classmethod
    def from_options(cls, options: dict[str, Any] | None) -> CalibrationState:
        """Build state from the host's options document."""
        return cls.model_validate(options or {})

    def to_options(self) -> dict[str, Any]:
        """Return the options document to persist."""
        return self.model_dump(mode="json", exclude_none=True)
