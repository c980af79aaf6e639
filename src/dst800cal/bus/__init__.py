"""NMEA 2000 bus abstraction layer.

The bus transport is external to this package. BusDriver describes what the
calibration session needs from it; MockBusDriver is an in-memory
implementation for tests, dry runs and simulations.

## Quick Start

```python
import asyncio

from dst800cal import CalibrationSession, CalibrationStore, MemoryBackend
from dst800cal.bus import MockBusDriver, SessionConfig

store = CalibrationStore(MemoryBackend({
    "instance": 35,
    "speed_through_water": {"request_value": True},
}))
bus = MockBusDriver()
session = CalibrationSession(bus, store, SessionConfig(settle_delay=0.0))

asyncio.run(session.start())
print(bus.sent)  # unlock, then the STW curve request
```
"""

from dst800cal.bus.config import SessionConfig
from dst800cal.bus.driver import BusDriver, RxCallback
from dst800cal.bus.mock import MockBusDriver

__all__ = [
    "BusDriver",
    "RxCallback",
    "MockBusDriver",
    "SessionConfig",
]
