"""Abstract interface for the NMEA 2000 bus transport.

The transport itself (CAN interface, gateway, or the host application's
message bus) lives outside this package. BusDriver is the seam: it takes raw
lines out, hands decoded messages in, and accepts derived signal updates.

Design Pattern: Adapter Pattern
- BusDriver: Abstract interface (transport-agnostic)
- MockBusDriver: In-memory implementation for tests and dry runs
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

RxCallback = Callable[[Mapping[str, Any]], None]


class BusDriver(ABC):
    """Abstract interface for NMEA 2000 bus access.

    Examples:
        ```python
        from dst800cal.bus import MockBusDriver

        bus = MockBusDriver()

        def on_message(msg):
            print(f"PGN {msg['pgn']} from {msg.get('src')}")

        bus.attach_rx_callback(on_message)
        bus.send_raw("2024-01-01T00:00:00.000Z,3,126208,0,35,18,00,00,ef,01,...")
        ```
    """

    @abstractmethod
    def send_raw(self, line: str) -> None:
        """Queue a raw ``timestamp,prio,pgn,src,dst,len,data`` line for transmission.

        Sends are fire-and-forget; nothing confirms the device received it.
        """
        pass

    @abstractmethod
    def attach_rx_callback(self, callback: RxCallback) -> None:
        """Register a callback for every decoded inbound message.

        Args:
            callback: Function(message: Mapping) -> None, where message has
                ``pgn``, ``src``, ``dst``, ``prio`` and ``fields`` keys
        """
        pass

    @abstractmethod
    def detach_rx_callback(self, callback: RxCallback) -> None:
        """Unregister a callback added with attach_rx_callback()."""
        pass

    @abstractmethod
    def publish_signal(self, path: str, value: float, timestamp: datetime) -> None:
        """Publish a derived value (e.g. ``navigation.speedSensorPulseRate``)."""
        pass
