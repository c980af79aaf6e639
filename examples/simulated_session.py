"""Simulated calibration session.

This example runs CalibrationSession against MockBusDriver, so the whole
request/response cycle can be exercised without a DST800 on the bus:

- Pending options are turned into raw Group Function lines
- A simulated device answers the STW curve request
- The answer lands in the options document

Run this example:
    python examples/simulated_session.py
"""

from __future__ import annotations

import asyncio
import json
import logging

from dst800cal import CalibrationSession, CalibrationStore, MemoryBackend
from dst800cal.bus import MockBusDriver, SessionConfig

DEVICE_ADDRESS = 35


def simulated_device(bus: MockBusDriver) -> None:
    """Answer the last STW curve request with a stored curve."""
    bus.deliver(
        {
            "pgn": 126720,
            "src": DEVICE_ADDRESS,
            "dst": 0,
            "prio": 3,
            "fields": {
                "Manufacturer Code": "Airmar",
                "Industry Code": "Marine Industry",
                "Proprietary ID": "Calibrate Speed",
                "list": [
                    {"Input frequency": 2.5, "Output speed": 0.5},
                    {"Input frequency": 10.0, "Output speed": 2.06},
                    {"Input frequency": 20.0, "Output speed": 4.1},
                ],
            },
        }
    )


async def main() -> None:
    """Run the simulated session."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("dst800cal Simulated Session")
    print("=" * 70)
    print()

    # ========================================================================
    # Step 1: Pending work, as the host would have saved it
    # ========================================================================
    print("Step 1: Pending options")
    print("-" * 70)
    backend = MemoryBackend(
        {
            "instance": DEVICE_ADDRESS,
            "depth_offset": {"set_value": True, "value": 0.4},
            "speed_pulse_count": {"enable": True, "interval": 1.0},
            "speed_through_water": {"request_value": True},
        }
    )
    print(json.dumps(backend.options, indent=2))
    print()

    # ========================================================================
    # Step 2: Start the session
    # ========================================================================
    print("Step 2: Start session")
    print("-" * 70)
    bus = MockBusDriver()
    session = CalibrationSession(
        bus, CalibrationStore(backend), SessionConfig(settle_delay=0.1)
    )
    await session.start()

    for line in bus.sent:
        print(f"  TX {line}")
    print()

    # ========================================================================
    # Step 3: Device answers
    # ========================================================================
    print("Step 3: Device reports its STW curve")
    print("-" * 70)
    simulated_device(bus)
    session.stop()

    print(json.dumps(backend.options, indent=2))
    print(f"Options saved {backend.save_count} times")
    print()


if __name__ == "__main__":
    asyncio.run(main())
