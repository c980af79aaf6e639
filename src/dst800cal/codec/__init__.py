"""Codec for DST800 calibration messages.

This module provides the little-endian primitives, the STW curve text format,
one encoder per calibration command and the inbound message decoder.
"""

from __future__ import annotations

from .primitives import ByteWriter, hex_pairs, le_bytes, to_fixed_width_hex, uint16_le, uint32_le
from .schema import ParameterField
from .curve import CurvePoint, parse_stw_calibration_string, stw_curve_to_string
from .encoder import (
    encode_access_level_unlock,
    encode_depth_offset,
    encode_speed_pulse_request,
    encode_stw_curve,
    encode_stw_curve_request,
    encode_stw_restore_defaults,
    encode_temperature_offset,
    encode_temperature_offset_request,
)
from .decoder import decode_inbound

__all__ = [
    "ByteWriter",
    "hex_pairs",
    "le_bytes",
    "to_fixed_width_hex",
    "uint16_le",
    "uint32_le",
    "ParameterField",
    "CurvePoint",
    "parse_stw_calibration_string",
    "stw_curve_to_string",
    "encode_access_level_unlock",
    "encode_depth_offset",
    "encode_speed_pulse_request",
    "encode_stw_curve",
    "encode_stw_curve_request",
    "encode_stw_restore_defaults",
    "encode_temperature_offset",
    "encode_temperature_offset_request",
    "decode_inbound",
]
