"""In-memory bus driver for tests and dry runs.

MockBusDriver records every raw line and signal it is given, and delivers
inbound messages to registered callbacks synchronously, the way a
single-threaded event loop would.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .driver import BusDriver, RxCallback

_logger = logging.getLogger(__name__)


class MockBusDriver(BusDriver):
    """Recording bus driver.

    Attributes:
        sent: Raw lines passed to send_raw(), in order
        signals: (path, value, timestamp) tuples passed to publish_signal()
        rx_callbacks: Registered RX callbacks

    Examples:
        ```python
        bus = MockBusDriver()
        bus.attach_rx_callback(reconciler.handle)
        bus.deliver({"pgn": 65409, "src": 35,
                     "fields": {"Number of pulses received": 100,
                                "Duration of interval": 2.0}})
        assert bus.signals[0][1] == 50.0
        ```
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.signals: list[tuple[str, float, datetime]] = []
        self.rx_callbacks: list[RxCallback] = []

    def send_raw(self, line: str) -> None:
        _logger.debug("TX %s", line)
        self.sent.append(line)

    def attach_rx_callback(self, callback: RxCallback) -> None:
        self.rx_callbacks.append(callback)
        _logger.debug("Registered RX callback (total: %d)", len(self.rx_callbacks))

    def detach_rx_callback(self, callback: RxCallback) -> None:
        if callback in self.rx_callbacks:
            self.rx_callbacks.remove(callback)

    def publish_signal(self, path: str, value: float, timestamp: datetime) -> None:
        self.signals.append((path, value, timestamp))

    def deliver(self, message: Mapping[str, Any]) -> None:
        """Hand an inbound message to every registered callback.

        A failing callback is logged and does not stop delivery to the others.
        """
        for callback in list(self.rx_callbacks):
            try:
                callback(message)
            except Exception:
                _logger.exception("RX callback error")

    def sent_payloads(self) -> list[list[str]]:
        """Return the hex byte pairs of every sent line."""
        return [line.split(",")[6:] for line in self.sent]
