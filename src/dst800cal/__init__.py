"""dst800cal: Airmar DST800 calibration over NMEA 2000

Reads and writes the in-device calibration of an Airmar DST800 triducer
(depth offset, speed-through-water curve, temperature offset) by sending
Airmar proprietary Command/Request Group Function messages (PGN 126208) and
folding the device's replies back into the calibration options.

Key Features:
- Byte-exact encoders for every DST800 calibration command
- Pydantic models for outbound commands, inbound reports and the options state
- Asyncio session that sequences unlock, settle and command steps
- Transport-agnostic bus interface with an in-memory mock

Quick Start:
    >>> from dst800cal import encode_depth_offset
    >>> msg = encode_depth_offset(35, -1.5)
    >>> msg.parameters[0].value
    -1500
    >>> msg.payload().hex()
    '010bf501f8010324fa'
"""

from __future__ import annotations

from .codec import (
    CurvePoint,
    decode_inbound,
    encode_access_level_unlock,
    encode_depth_offset,
    encode_speed_pulse_request,
    encode_stw_curve,
    encode_stw_curve_request,
    encode_stw_restore_defaults,
    encode_temperature_offset,
    encode_temperature_offset_request,
    parse_stw_calibration_string,
    stw_curve_to_string,
    to_fixed_width_hex,
    uint16_le,
    uint32_le,
)
from .exceptions import (
    CalibrationParseError,
    DecodeError,
    Dst800Error,
    EncodeError,
    MissingDeviceAddressError,
    StoreError,
)
from .models import CalibrationState, FunctionCode, ProprietaryCommandMessage
from .reconciler import ResponseReconciler
from .session import CalibrationSession
from .store import CalibrationStore, JsonFileBackend, MemoryBackend, OptionsBackend

__version__ = "0.1.0"

__all__ = [
    # Codec
    "CurvePoint",
    "decode_inbound",
    "encode_access_level_unlock",
    "encode_depth_offset",
    "encode_speed_pulse_request",
    "encode_stw_curve",
    "encode_stw_curve_request",
    "encode_stw_restore_defaults",
    "encode_temperature_offset",
    "encode_temperature_offset_request",
    "parse_stw_calibration_string",
    "stw_curve_to_string",
    "to_fixed_width_hex",
    "uint16_le",
    "uint32_le",
    # Models
    "CalibrationState",
    "FunctionCode",
    "ProprietaryCommandMessage",
    # Exceptions
    "Dst800Error",
    "EncodeError",
    "MissingDeviceAddressError",
    "DecodeError",
    "CalibrationParseError",
    "StoreError",
    # Session
    "CalibrationSession",
    "ResponseReconciler",
    # Persistence
    "CalibrationStore",
    "OptionsBackend",
    "MemoryBackend",
    "JsonFileBackend",
    # Version
    "__version__",
]
