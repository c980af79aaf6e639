"""Decoder for inbound bus messages.

The bus transport hands over messages that have already been through its PGN
database, as mappings of the form::

    {"pgn": 128267, "src": 35, "dst": 255, "prio": 3,
     "fields": {"Depth": 12.4, "Offset": -0.5}}

decode_inbound() turns one of these into the typed model registered for its
PGN.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..exceptions import DecodeError
from ..models.base import InboundMessage
from ..routing import message_class_for

_HEADER_KEYS = ("pgn", "src", "dst", "prio")


def decode_inbound(raw: Mapping[str, Any]) -> InboundMessage | None:
    """Decode one inbound message.

    Args:
        raw: Message mapping with header keys and a ``fields`` mapping

    Returns:
        Typed message, or None if no model is registered for the PGN

    Raises:
        DecodeError: If the message is malformed or a required field is missing
    """
    if not isinstance(raw, Mapping):
        raise DecodeError(f"Inbound message must be a mapping, got {type(raw).__name__}")

    pgn = raw.get("pgn")
    if not isinstance(pgn, int) or isinstance(pgn, bool):
        raise DecodeError(f"Inbound message has no valid PGN: {pgn!r}")

    message_class = message_class_for(pgn)
    if message_class is None:
        return None

    fields = raw.get("fields") or {}
    if not isinstance(fields, Mapping):
        raise DecodeError(f"PGN {pgn}: fields must be a mapping, got {type(fields).__name__}")

    data: dict[str, Any] = dict(fields)
    for key in _HEADER_KEYS:
        if key in raw:
            data[key] = raw[key]

    try:
        return message_class.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Failed to decode PGN {pgn} as {message_class.__name__}: {e}") from e
