"""Base message classes and dst800cal-specific Pydantic configuration.

Outbound messages are built by this package and validated strictly. Inbound
messages come from the bus transport's PGN decoder, which reports many more
fields than are needed here, so unknown fields are ignored.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class BaseMessage(BaseModel):
    """Base class for messages built by dst800cal.

    Attributes:
        n2k_pgn: PGN the message is transmitted as (optional)
        n2k_max_bytes: Maximum encoded payload size in bytes (optional)
    """

    model_config = ConfigDict(
        strict=False,
        validate_assignment=True,
        extra="forbid",
    )

    n2k_pgn: ClassVar[int | None] = None
    n2k_max_bytes: ClassVar[int | None] = None


class InboundMessage(BaseModel):
    """Base class for decoded bus messages.

    Field values are looked up by the names the transport uses (``"Offset"``,
    ``"Function Code"``, ...), declared as aliases on each subclass.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    n2k_pgn: ClassVar[int | None] = None

    pgn: int
    src: int | None = None
    dst: int | None = None
    prio: int | None = None
