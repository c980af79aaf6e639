#!/usr/bin/env python3
"""Basic usage example for dst800cal.

This example demonstrates:
1. Encoding a depth offset command
2. Parsing an STW calibration curve and encoding it
3. Rendering commands as raw bus lines
4. Decoding an inbound device report
"""

from __future__ import annotations

from dst800cal import (
    decode_inbound,
    encode_access_level_unlock,
    encode_depth_offset,
    encode_stw_curve,
    parse_stw_calibration_string,
)

DEVICE_ADDRESS = 35

CURVE_TEXT = """
2.5   0.5
10.0  2.06
20.0  4.1
"""


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("dst800cal Basic Usage Example")
    print("=" * 60)
    print()

    # Depth offset: plain command, no unlock needed
    print("1. Encoding a depth offset of -1.5 m (keel offset)...")
    depth = encode_depth_offset(DEVICE_ADDRESS, -1.5)

    print(f"   Commanded PGN: {depth.commanded_pgn}")
    for parameter in depth.parameters:
        print(f"   Parameter {parameter.index} ({parameter.name}): {parameter.value}")
    print(f"   Payload: {depth.payload().hex()}")
    print()

    # STW curve: parse the operator text first
    print("2. Parsing the STW calibration curve...")
    curve = parse_stw_calibration_string(CURVE_TEXT)
    for point in curve:
        print(f"   {point.frequency_hz:6.1f} Hz -> {point.speed_mps:5.2f} m/s")
    print()

    print("3. Encoding the curve (preceded by an access level unlock)...")
    unlock = encode_access_level_unlock(DEVICE_ADDRESS)
    command = encode_stw_curve(DEVICE_ADDRESS, curve)

    print(f"   Parameters: {len(command.parameters)}")
    print(f"   Payload size: {len(command.payload())} bytes")
    print()

    print("4. Raw bus lines...")
    for message in (unlock, command):
        print(f"   {message.to_actisense()}")
    print()

    # Inbound: what the transport hands back after its PGN decode
    print("5. Decoding a device report...")
    report = decode_inbound(
        {
            "pgn": 128267,
            "src": DEVICE_ADDRESS,
            "dst": 255,
            "fields": {"Depth": 12.4, "Offset": -1.5},
        }
    )
    print(f"   {type(report).__name__}: depth {report.depth} m, offset {report.offset} m")
    print()

    print("=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
