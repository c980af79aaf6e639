"""Pydantic models for dst800cal.

This module provides the outbound group function message, typed inbound
messages and the calibration state.
"""

from __future__ import annotations

from .base import BaseMessage, InboundMessage
from .command import FunctionCode, Parameter, ProprietaryCommandMessage
from .inbound import (
    AirmarProprietary,
    GroupFunction,
    SpeedCalibrationPoint,
    SpeedPulseCount,
    WaterDepth,
)
from .state import CalibrationState

__all__ = [
    "BaseMessage",
    "InboundMessage",
    "FunctionCode",
    "Parameter",
    "ProprietaryCommandMessage",
    "AirmarProprietary",
    "GroupFunction",
    "SpeedCalibrationPoint",
    "SpeedPulseCount",
    "WaterDepth",
    "CalibrationState",
]
