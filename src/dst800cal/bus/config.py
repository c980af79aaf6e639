"""Configuration for a calibration session."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionConfig:
    """Timing and addressing options for CalibrationSession.

    Attributes:
        settle_delay: Seconds to wait after an access level unlock before the
            dependent command (default 1.0). The device needs this time to
            apply the unlock; nothing on the bus signals when it is done.

        await_unlock_ack: If True, stop waiting as soon as the device
            acknowledges the unlock, with ``settle_delay`` as the timeout.
            Default False, which always waits the full delay.

        priority: Priority of emitted group function messages (0-7, default 3)

        source_address: Source address written into raw lines (default 0).
            The transport replaces it with its own claimed address.

        match_source: Only react to inbound messages whose source address
            equals the configured device address (default True)

    Examples:
        ```python
        # Tests and dry runs: no waiting
        config = SessionConfig(settle_delay=0.0)

        # Wait for the unlock acknowledgement, up to 2 seconds
        config = SessionConfig(settle_delay=2.0, await_unlock_ack=True)
        ```
    """

    settle_delay: float = 1.0
    await_unlock_ack: bool = False
    priority: int = 3
    source_address: int = 0
    match_source: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.settle_delay < 0:
            raise ValueError(f"settle_delay must be >= 0, got {self.settle_delay}")

        if not 0 <= self.priority <= 7:
            raise ValueError(f"priority must be 0-7, got {self.priority}")

        if not 0 <= self.source_address <= 255:
            raise ValueError(f"source_address must be 0-255, got {self.source_address}")
