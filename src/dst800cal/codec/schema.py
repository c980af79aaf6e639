"""Protocol constants and proprietary parameter descriptors.

This module describes the parameters the DST800 accepts inside a Command or
Request Group Function: which parameter index each value goes into, how many
bytes it occupies and what scale the device expects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from ..exceptions import EncodeError
from .primitives import le_bytes

# PGNs
PGN_GROUP_FUNCTION = 126208
PGN_ACCESS_LEVEL = 65287
PGN_SPEED_PULSE_COUNT = 65409
PGN_AIRMAR_PROPRIETARY = 126720
PGN_WATER_DEPTH = 128267

# Envelope shared by every Airmar proprietary command
MANUFACTURER_AIRMAR = 135
INDUSTRY_MARINE = 4
MANUFACTURER_NAME = "Airmar"
INDUSTRY_NAME = "Marine Industry"

# Proprietary IDs within PGN 126720
PROPRIETARY_ID_CALIBRATE_DEPTH = 40
PROPRIETARY_ID_CALIBRATE_SPEED = 41
PROPRIETARY_ID_CALIBRATE_TEMPERATURE = 42
CALIBRATE_DEPTH = "Calibrate Depth"
CALIBRATE_SPEED = "Calibrate Speed"
CALIBRATE_TEMPERATURE = "Calibrate Temperature"

# Group function defaults
COMMAND_PRIORITY = 3
PRIORITY_UNCHANGED = 0xF8
INTERVAL_UNCHANGED = 0xFFFFFFFF
INTERVAL_OFFSET_UNCHANGED = 0xFFFF

# Access level unlock; only level 1 is supported
ACCESS_FORMAT_CODE = 1
ACCESS_LEVEL = 1
ACCESS_SEED = 0x12345678

STW_FACTORY_DEFAULTS = 0xFE
TEMPERATURE_SENSOR_ONBOARD = 1

# Largest payload a fast-packet transfer can carry
FAST_PACKET_MAX_BYTES = 223


@dataclass(frozen=True)
class ParameterField:
    """Encoding information for one proprietary parameter.

    Attributes:
        name: Human readable field name (used in logs and structured output)
        index: Parameter index within the group function
        size: Width in bytes (1-4), little-endian
        scale: Multiplier applied before rounding (e.g. 1000 for m -> mm)
        signed: Whether negative values are allowed (two's complement)
    """

    name: str
    index: int
    size: int
    scale: float = 1
    signed: bool = False

    def at(self, index: int) -> ParameterField:
        """Return a copy of this field placed at another parameter index."""
        return replace(self, index=index)

    def scaled(self, value: float) -> int:
        """Scale and round ``value`` to the integer sent on the wire.

        Raises:
            EncodeError: If the value is not finite or does not fit the field
        """
        if not math.isfinite(value):
            raise EncodeError(f"{self.name}: value must be finite, got {value}")

        raw = math.floor(value * self.scale + 0.5)
        bits = 8 * self.size
        if self.signed:
            low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            low, high = 0, (1 << bits) - 1
        if raw < low or raw > high:
            raise EncodeError(
                f"{self.name}: value {value} (raw {raw}) out of bounds [{low}, {high}]"
            )
        return raw

    def encode(self, value: float) -> bytes:
        """Scale ``value`` and return its little-endian bytes."""
        return le_bytes(self.scaled(value), self.size)


MANUFACTURER_CODE = ParameterField("Manufacturer Code", 1, 2)
INDUSTRY_GROUP = ParameterField("Industry Group", 3, 1)
PROPRIETARY_ID = ParameterField("Proprietary ID", 4, 1)

DEPTH_OFFSET = ParameterField("Offset", 3, 2, scale=1000, signed=True)

ACCESS_FORMAT = ParameterField("Format Code", 4, 1)
ACCESS_LEVEL_FIELD = ParameterField("Access Level", 5, 1)
ACCESS_SEED_FIELD = ParameterField("Seed", 7, 4)

STW_POINT_COUNT = ParameterField("Number of data points", 5, 1)
STW_FREQUENCY = ParameterField("Input frequency", 6, 2, scale=10)
STW_SPEED = ParameterField("Output speed", 7, 2, scale=100)
STW_FIRST_POINT_INDEX = 6
# Manufacturer, Industry, Proprietary ID, point count
STW_HEADER_PARAMETERS = 4

TEMPERATURE_SENSOR = ParameterField("Temperature instance", 5, 1)
# The offset is passed through to the device unscaled
TEMPERATURE_OFFSET = ParameterField("Temperature offset", 7, 2, signed=True)
