"""Typed views of the inbound PGNs this package reacts to.

Each class maps the transport's field names onto attributes. Enumerated
fields (function code, manufacturer, proprietary ID) arrive as their display
strings; numeric fields arrive already scaled to SI units.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..codec.schema import (
    INDUSTRY_NAME,
    MANUFACTURER_NAME,
    PGN_AIRMAR_PROPRIETARY,
    PGN_GROUP_FUNCTION,
    PGN_SPEED_PULSE_COUNT,
    PGN_WATER_DEPTH,
)
from .base import InboundMessage


class WaterDepth(InboundMessage):
    """PGN 128267 - Water Depth, broadcast continuously."""

    n2k_pgn: ClassVar[int | None] = PGN_WATER_DEPTH

    depth: float | None = Field(default=None, alias="Depth")
    offset: float | None = Field(default=None, alias="Offset")


class SpeedPulseCount(InboundMessage):
    """PGN 65409 - Airmar speed pulse count."""

    n2k_pgn: ClassVar[int | None] = PGN_SPEED_PULSE_COUNT

    duration: float = Field(alias="Duration of interval")
    pulses: int = Field(alias="Number of pulses received")

    @property
    def pulse_rate(self) -> float:
        """Pulses per second over the reported interval."""
        return self.pulses / self.duration


class GroupFunction(InboundMessage):
    """PGN 126208 - Request/Command/Acknowledge Group Function."""

    n2k_pgn: ClassVar[int | None] = PGN_GROUP_FUNCTION

    function_code: str | int = Field(alias="Function Code")
    commanded_pgn: int | None = Field(default=None, alias="PGN")
    pgn_error_code: str | int | None = Field(default=None, alias="PGN error code")
    parameters: list[dict[str, Any]] = Field(default_factory=list, alias="list")

    @property
    def is_acknowledge(self) -> bool:
        return self.function_code in ("Acknowledge", 2)

    @property
    def pgn_accepted(self) -> bool:
        """False if the device reported an error for the commanded PGN."""
        return self.pgn_error_code in (None, "Acknowledge", 0)


class AirmarProprietary(InboundMessage):
    """PGN 126720 - Airmar addressable multi-frame proprietary report."""

    n2k_pgn: ClassVar[int | None] = PGN_AIRMAR_PROPRIETARY

    manufacturer: str | int | None = Field(default=None, alias="Manufacturer Code")
    industry: str | int | None = Field(default=None, alias="Industry Code")
    proprietary_id: str | int | None = Field(default=None, alias="Proprietary ID")
    parameters: list[dict[str, Any]] = Field(default_factory=list, alias="list")

    @property
    def is_airmar(self) -> bool:
        return self.manufacturer == MANUFACTURER_NAME and self.industry == INDUSTRY_NAME


class SpeedCalibrationPoint(BaseModel):
    """One entry of a Calibrate Speed report's parameter list."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    frequency_hz: float = Field(alias="Input frequency")
    speed_mps: float = Field(alias="Output speed")
