"""Outbound Command/Request Group Function messages (PGN 126208)."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import Field

from ..codec.primitives import ByteWriter, hex_pairs
from ..codec.schema import (
    COMMAND_PRIORITY,
    FAST_PACKET_MAX_BYTES,
    INTERVAL_OFFSET_UNCHANGED,
    INTERVAL_UNCHANGED,
    PGN_GROUP_FUNCTION,
    PRIORITY_UNCHANGED,
)
from ..exceptions import EncodeError
from .base import BaseMessage


class FunctionCode(enum.IntEnum):
    """Group function codes."""

    REQUEST = 0
    COMMAND = 1
    ACKNOWLEDGE = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Parameter(BaseMessage):
    """One (index, value) pair of a group function parameter list.

    Attributes:
        index: Parameter index in the commanded PGN
        data: Encoded little-endian value
        value: Integer sent on the wire, after scaling (for display)
        name: Field name (for display)
    """

    index: int = Field(ge=0, le=255)
    data: bytes = Field(min_length=1, max_length=4)
    value: int
    name: str = ""


class ProprietaryCommandMessage(BaseMessage):
    """A Command or Request Group Function addressed to one device.

    The payload layout is:

    - Request: function code, PGN (3 bytes), transmission interval (4 bytes),
      interval offset (2 bytes), parameter count, parameters
    - Command: function code, PGN (3 bytes), priority setting, parameter count,
      parameters

    Each parameter is its index byte followed by its value bytes.

    Example:
        >>> msg = encode_stw_curve_request(35)
        >>> msg.to_actisense(datetime(2024, 1, 1, tzinfo=timezone.utc))
        '2024-01-01T00:00:00.000Z,3,126208,0,35,18,00,00,ef,01,ff,ff,ff,ff,ff,ff,03,...'
    """

    n2k_pgn: ClassVar[int | None] = PGN_GROUP_FUNCTION
    n2k_max_bytes: ClassVar[int | None] = FAST_PACKET_MAX_BYTES

    destination: int = Field(ge=0, le=255)
    function_code: FunctionCode
    commanded_pgn: int = Field(ge=0, le=0x1FFFF)
    priority: int = Field(default=COMMAND_PRIORITY, ge=0, le=7)
    priority_setting: int = Field(default=PRIORITY_UNCHANGED, ge=0, le=0xFF)
    transmission_interval: int = Field(default=INTERVAL_UNCHANGED, ge=0, le=0xFFFFFFFF)
    transmission_interval_offset: int = Field(default=INTERVAL_OFFSET_UNCHANGED, ge=0, le=0xFFFF)
    parameters: list[Parameter] = Field(default_factory=list, max_length=255)

    def payload(self) -> bytes:
        """Serialize the group function payload.

        Raises:
            EncodeError: If the payload exceeds the fast-packet limit
        """
        writer = ByteWriter()
        writer.write_uint8(int(self.function_code))
        writer.write_uint24(self.commanded_pgn)

        if self.function_code == FunctionCode.REQUEST:
            writer.write_uint32(self.transmission_interval)
            writer.write_uint16(self.transmission_interval_offset)
        else:
            writer.write_uint8(self.priority_setting)

        writer.write_uint8(len(self.parameters))
        for parameter in self.parameters:
            writer.write_uint8(parameter.index)
            writer.write_bytes(parameter.data)

        max_bytes = type(self).n2k_max_bytes
        if max_bytes is not None and writer.byte_length() > max_bytes:
            raise EncodeError(
                f"Encoded payload size ({writer.byte_length()} bytes) exceeds "
                f"the {max_bytes} byte fast-packet limit"
            )
        return writer.to_bytes()

    def to_actisense(self, timestamp: datetime | None = None, source: int = 0) -> str:
        """Render the message as a raw ``timestamp,prio,pgn,src,dst,len,data`` line.

        Args:
            timestamp: Time stamp for the line (defaults to now, UTC)
            source: Source address placeholder; the transport fills in its own

        Returns:
            Comma separated ASCII line with hex byte pairs
        """
        data = self.payload()
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        stamp = timestamp.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        stamp = stamp.replace("+00:00", "Z")
        return (
            f"{stamp},{self.priority},{self.n2k_pgn},{source},"
            f"{self.destination},{len(data)},{hex_pairs(data)}"
        )

    def to_fields(self) -> dict[str, Any]:
        """Return the structured view used for logging."""
        fields: dict[str, Any] = {
            "Function Code": self.function_code.label,
            "PGN": self.commanded_pgn,
        }
        if self.function_code == FunctionCode.REQUEST:
            fields["Transmission interval"] = self.transmission_interval
            fields["Transmission interval offset"] = self.transmission_interval_offset
        else:
            fields["Priority"] = self.priority_setting
        fields["Number of Parameters"] = len(self.parameters)
        fields["list"] = [
            {"Parameter": p.index, "Value": p.value, "Name": p.name} for p in self.parameters
        ]
        return {
            "pgn": self.n2k_pgn,
            "dst": self.destination,
            "prio": self.priority,
            "fields": fields,
        }
