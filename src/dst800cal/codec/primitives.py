"""Fixed-width integer primitives for NMEA 2000 payloads.

NMEA 2000 fields are little-endian. Values are rounded half up and wrapped
modulo 2**32 before rendering, so negative numbers come out in two's
complement. Anything wider than 32 bits is silently truncated.
"""

from __future__ import annotations

import math

_WRAP = 1 << 32


def to_fixed_width_hex(n: float, width: int, pad_char: str = "0") -> str:
    """Render ``n`` as lowercase hex, padded to ``width`` characters.

    Args:
        n: Any real number; rounded half up, then wrapped to unsigned 32 bits
        width: Number of hex digits to keep (the least significant ones)
        pad_char: Character used for left padding

    Returns:
        Hex string of exactly ``width`` characters

    Example:
        >>> to_fixed_width_hex(-1500, 4)
        'fa24'
    """
    value = math.floor(n + 0.5) % _WRAP
    pad = pad_char * width
    return (pad + format(value, "x"))[-width:] if width > 0 else ""


def uint16_le(n: float) -> str:
    """Encode ``n`` as two comma-joined hex bytes, low byte first."""
    pad = to_fixed_width_hex(n, 4)
    return f"{pad[2:4]},{pad[0:2]}"


def uint32_le(n: float) -> str:
    """Encode ``n`` as four comma-joined hex bytes, least significant first."""
    pad = to_fixed_width_hex(n, 8)
    return ",".join(pad[i : i + 2] for i in (6, 4, 2, 0))


def le_bytes(n: float, size: int) -> bytes:
    """Encode ``n`` as ``size`` little-endian bytes (1-4).

    Raises:
        ValueError: If size is outside 1-4
    """
    if size < 1 or size > 4:
        raise ValueError(f"size must be 1-4 bytes, got {size}")
    return bytes.fromhex(to_fixed_width_hex(n, size * 2))[::-1]


def hex_pairs(data: bytes) -> str:
    """Render bytes as comma-joined lowercase hex pairs."""
    return ",".join(f"{b:02x}" for b in data)


class ByteWriter:
    """Accumulates little-endian fields into a byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_uint8(0x01)
        >>> writer.write_uint24(126720)
        >>> writer.to_bytes().hex()
        '0100ef01'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_uint8(self, value: int) -> None:
        self._write_uint(value, 1)

    def write_uint16(self, value: int) -> None:
        self._write_uint(value, 2)

    def write_uint24(self, value: int) -> None:
        self._write_uint(value, 3)

    def write_uint32(self, value: int) -> None:
        self._write_uint(value, 4)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes unchanged."""
        self._buffer.extend(data)

    def _write_uint(self, value: int, size: int) -> None:
        if value < 0:
            raise ValueError(f"unsigned field requires non-negative value, got {value}")
        max_value = (1 << (8 * size)) - 1
        if value > max_value:
            raise ValueError(f"Value {value} requires more than {size} bytes (max: {max_value})")
        self._buffer.extend(value.to_bytes(size, "little"))

    def byte_length(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)
