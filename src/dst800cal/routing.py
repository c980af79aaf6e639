"""PGN dispatch for inbound messages.

This module maps PGN numbers to the InboundMessage subclass that describes
them, so an inbound message can be decoded into a typed model by looking at
its PGN alone.
"""

from __future__ import annotations

from .models.base import InboundMessage
from .models.inbound import AirmarProprietary, GroupFunction, SpeedPulseCount, WaterDepth

# Global registry: pgn -> message_class
PGN_REGISTRY: dict[int, type[InboundMessage]] = {}


def register_pgn(message_class: type[InboundMessage]) -> None:
    """Register an inbound message class for decode by PGN.

    Args:
        message_class: InboundMessage subclass with an n2k_pgn attribute

    Raises:
        ValueError: If message_class has no n2k_pgn or the PGN is already taken

    Example:
        >>> register_pgn(WaterDepth)
        >>> PGN_REGISTRY[128267] is WaterDepth
        True
    """
    pgn = getattr(message_class, "n2k_pgn", None)
    if pgn is None:
        raise ValueError(
            f"{message_class.__name__} has no n2k_pgn attribute. "
            f"Cannot register for decode by PGN."
        )

    if not isinstance(pgn, int) or pgn < 0 or pgn > 0x1FFFF:
        raise ValueError(f"n2k_pgn must be an integer 0-131071, got {pgn}")

    existing = PGN_REGISTRY.get(pgn)
    if existing is not None and existing is not message_class:
        raise ValueError(
            f"PGN {pgn} already registered to {existing.__name__}. "
            f"Cannot register {message_class.__name__} with the same PGN."
        )

    PGN_REGISTRY[pgn] = message_class


def message_class_for(pgn: int) -> type[InboundMessage] | None:
    """Return the registered class for ``pgn``, or None if it is not handled."""
    return PGN_REGISTRY.get(pgn)


for _message_class in (WaterDepth, SpeedPulseCount, GroupFunction, AirmarProprietary):
    register_pgn(_message_class)
